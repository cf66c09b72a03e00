CONFIG = {
    'commands': {
        'modules': [
            'formtree.types',
            'formtree.schemas',
            'formtree.bindings',
            'formtree.forms',
        ],
    },
    'components': {
        'core': {
            'context': 'formtree.components:Context',
            'config': 'formtree.components:Config',
        },
    },

    # What to do with existing collection items, when input has fewer items:
    # keep, drop or error.
    'populate': {
        'surplus': 'keep',
    },

    'env': 'prod',
    'debug': False,

    'environments': {
        'dev': {
            'debug': True,
        },
        'test': {
            'debug': True,
        },
    },
}
