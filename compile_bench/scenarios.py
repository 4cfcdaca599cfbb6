"""
Stress scenarios and their C/C++ source generators.

Each scenario emits ``n`` units of work (functions, structs or call sites) and
a single ``main`` that uses every unit once, in ascending index order. The
exact text matters: compile time is sensitive to code shape.
"""

from enum import Enum
from typing import Callable, Dict, List


class Scenario(str, Enum):
    """Code shapes used to stress a specific compiler subsystem"""

    EMPTY = "Empty"
    FUNCS = "Funcs"
    CPP_MEMBER = "CppMember"
    FREE_FUNC = "FreeFunc"
    CPP_OVERLOAD = "CppOverload"
    NO_OVERLOAD = "NoOverload"
    RETURN_BY_VALUE = "ReturnByValue"
    RETURN_BY_POINTER = "ReturnByPointer"

    @property
    def requires_cpp(self) -> bool:
        """Member functions and overloads only exist in C++"""
        return self.value.startswith("Cpp")

    @property
    def slug(self) -> str:
        return self.value.lower()


def source_file_name(cpp: bool) -> str:
    return "test.cpp" if cpp else "test.c"


def _main(body: List[str], opener: str = "int main() {") -> List[str]:
    return [opener, *body, "    return 0;", "}"]


def _funcs(n: int) -> List[str]:
    lines = ["int f0(int x){return x;}"]
    lines += [f"int f{i}(int x){{return f{i - 1}(x);}}" for i in range(1, n)]
    return lines + _main([f"    f{i}(0);" for i in range(n)], "int main(){")


def _cpp_member(n: int) -> List[str]:
    lines = ["struct S { int m(int x){return x;} };"]
    lines += [f"int f{i}(int x){{S s; return s.m(x);}}" for i in range(n)]
    return lines + _main([f"    f{i}(0);" for i in range(n)], "int main(){")


def _free_func(n: int) -> List[str]:
    lines = ["typedef struct S { int v; } S;", "int call(S* s, int x) { return x; }"]
    lines += [f"int f{i}(int x) {{ S s; return call(&s, x); }}" for i in range(n)]
    return lines + _main([f"    f{i}(0);" for i in range(n)])


def _cpp_overload(n: int) -> List[str]:
    lines = [f"struct S{i} {{ int v; }};" for i in range(n)]
    lines += [f"int f(S{i}* s) {{ return s->v; }}" for i in range(n)]
    return lines + _main([f"    S{i} s{i}; f(&s{i});" for i in range(n)])


def _no_overload(n: int) -> List[str]:
    lines = [f"typedef struct {{ int v; }} S{i};" for i in range(n)]
    lines += [f"int f{i}(S{i}* s) {{ return s->v; }}" for i in range(n)]
    return lines + _main([f"    S{i} s{i}; f{i}(&s{i});" for i in range(n)])


def _return_by_value(n: int) -> List[str]:
    lines = ["typedef struct S { int v; } S;"]
    lines += [f"S f{i}() {{ S s = {{ {i} }}; return s; }}" for i in range(n)]
    # (void) keeps the call from being treated as dead code
    return lines + _main([f"    {{ S s = f{i}(); (void)s.v; }} " for i in range(n)])


def _return_by_pointer(n: int) -> List[str]:
    lines = ["typedef struct S { int v; } S;"]
    lines += [f"S* f{i}() {{ static S s = {{ {i} }}; return &s; }}" for i in range(n)]
    return lines + _main([f"    {{ S* s = f{i}(); (void)s->v; }} " for i in range(n)])


GENERATORS: Dict[Scenario, Callable[[int], List[str]]] = {
    Scenario.FUNCS: _funcs,
    Scenario.CPP_MEMBER: _cpp_member,
    Scenario.FREE_FUNC: _free_func,
    Scenario.CPP_OVERLOAD: _cpp_overload,
    Scenario.NO_OVERLOAD: _no_overload,
    Scenario.RETURN_BY_VALUE: _return_by_value,
    Scenario.RETURN_BY_POINTER: _return_by_pointer,
}


def generate_code(scenario: Scenario, n: int) -> str:
    """Generate the translation unit for ``scenario`` with ``n`` units of work"""
    if scenario is Scenario.EMPTY:
        return ""
    if n <= 0:
        raise ValueError(f"{scenario.value} needs a positive size, got n={n}")

    return "\n".join(GENERATORS[scenario](n)) + "\n"
