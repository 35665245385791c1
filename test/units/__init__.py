from __future__ import annotations

import importlib

from .. import rebyte, TestBase
from rebyte.units import Entry, LogLevel

__all__ = ['rebyte', 'TestUnitBase']


class TestUnitBase(TestBase):
    """
    Base class for unit tests. The unit under test is derived from the name of the test module:
    the tests in `test.units.encoding.test_esc` exercise `rebyte.units.encoding.esc.esc`.
    """

    @classmethod
    def unit(cls) -> type[rebyte.Unit]:
        *path, module = cls.__module__.split('.')[1:]
        name = module.removeprefix('test_')
        module = importlib.import_module('.'.join(['rebyte', *path, name]))
        unit = getattr(module, name)
        assert isinstance(unit, type) and issubclass(unit, Entry)
        return unit

    def load(self, *args, **kwargs) -> rebyte.Unit:
        """
        Assemble the unit under test from command line arguments and keywords, detached from
        its logger so that errors are raised.
        """
        unit = self.unit().assemble(*args, **kwargs)
        unit.log_level = LogLevel.DETACHED
        return unit
