import logging

from formtree import commands
from formtree import exceptions
from formtree.components import Config
from formtree.components import Context
from formtree.components import Surplus
from formtree.core.config import RawConfig
from formtree.utils.config import asbool

log = logging.getLogger(__name__)


@commands.load.register(Context, Config, RawConfig)
def load(context: Context, config: Config, rc: RawConfig) -> Config:
    config.rc = rc
    config.env = rc.get('env')
    config.debug = rc.get('debug', default=False, cast=asbool)
    config.commands = rc.get('commands', 'modules', cast=list)

    surplus = rc.get('populate', 'surplus', default=Surplus.keep.value)
    try:
        config.surplus = Surplus(surplus)
    except ValueError:
        raise exceptions.InvalidConfigValue(
            option='populate.surplus',
            given=surplus,
            choices=', '.join(item.value for item in Surplus),
        )

    log.debug("Config loaded from: %s", ', '.join(rc.get_source_names()))
    return config
