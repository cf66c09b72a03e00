pytest_plugins = ['formtree.testing.pytest']
