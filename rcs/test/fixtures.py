"""Source snippets shared by the tests."""

PROGRAM_SOURCE = '''
class Test:
    class Program:
        @staticmethod
        def Main(args):
            print("Press ENTER key to start ...")
            for c in range(101):
                print(c)
'''

FOO_BAR_SOURCE = '''
class Foo:
    def __init__(self, my_property=0):
        self._my_property = my_property

    @property
    def MyProperty(self):
        return self._my_property


class _BarMeta(type):
    @property
    def MyFoo(cls):
        return cls._my_foo_value


class Bar(metaclass=_BarMeta):
    _my_foo_value = Foo(my_property=42)
'''

MISSING_COLON_SOURCE = '''
class Broken
    def method(self):
        return 1
'''

CALCULATOR_SOURCE = '''
import math


class Calculator:
    """Small calculator used to exercise the resolver."""

    precision = 2

    def __init__(self, offset=0):
        self.offset = offset
        self.__secret = "hidden"

    def add(self, a: int, b: int) -> int:
        return a + b + self.offset

    def scale(self, value: float, factor: float = 2.0) -> float:
        return round(value * factor, self.precision)

    def total(self, *values: int) -> int:
        return sum(values) + self.offset

    def reset(self):
        self.offset = 0

    def fail(self):
        raise ValueError("boom")

    def leave(self):
        raise SystemExit(3)

    def _internal(self):
        return "internal"

    def __mangled(self):
        return "mangled"

    @property
    def description(self):
        return f"Calculator(offset={self.offset})"

    @staticmethod
    def square_root(value: float) -> float:
        return math.sqrt(value)

    @classmethod
    def create(cls, offset: int):
        return cls(offset)

    @staticmethod
    def _hidden_static():
        return "hidden static"
'''

FAILING_MODULE_SOURCE = '''
class Never:
    pass

raise RuntimeError("module body failed")
'''
