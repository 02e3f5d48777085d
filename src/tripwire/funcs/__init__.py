"""Built-in assertion functions available on every full chain instance."""

from tripwire.funcs.equal import (
    deep_equal_func,
    deep_strict_equal_func,
    equal_func,
    loose_equal,
    strict_equal,
    strict_equal_func,
)
from tripwire.funcs.include import include_func
from tripwire.funcs.match import match_func
from tripwire.funcs.property import has_property_func, property_result_op
from tripwire.funcs.throws import throws_func
from tripwire.funcs.truthy import false_func, strict_false_func, strict_true_func, true_func, truthy_func
from tripwire.funcs.types import (
    callable_func,
    dict_func,
    empty_func,
    instance_of_func,
    list_func,
    none_func,
    number_func,
    string_func,
)
from tripwire.instance import FuncDef, register_builtin_funcs

CORE_FUNCS: dict[str, FuncDef] = {
    # equality
    "equal": FuncDef(scope_fn=equal_func),
    "equals": FuncDef(scope_fn=equal_func),
    "eq": FuncDef(scope_fn=equal_func),
    "strict_equal": FuncDef(scope_fn=strict_equal_func),
    "deep_equal": FuncDef(scope_fn=deep_equal_func),
    "deep_strict_equal": FuncDef(scope_fn=deep_strict_equal_func),
    # truthiness
    "ok": FuncDef(scope_fn=truthy_func),
    "truthy": FuncDef(scope_fn=truthy_func),
    "true": FuncDef(scope_fn=true_func),
    "false": FuncDef(scope_fn=false_func),
    # types
    "none": FuncDef(scope_fn=none_func),
    "string": FuncDef(scope_fn=string_func),
    "number": FuncDef(scope_fn=number_func),
    "list": FuncDef(scope_fn=list_func),
    "array": FuncDef(scope_fn=list_func),
    "dict": FuncDef(scope_fn=dict_func),
    "object": FuncDef(scope_fn=dict_func),
    "callable": FuncDef(scope_fn=callable_func),
    "function": FuncDef(scope_fn=callable_func),
    "empty": FuncDef(scope_fn=empty_func),
    "instance_of": FuncDef(scope_fn=instance_of_func),
    "instanceof": FuncDef(scope_fn=instance_of_func),
    # property
    "property": FuncDef(scope_fn=has_property_func),
    # include
    "include": FuncDef(scope_fn=include_func),
    "includes": FuncDef(scope_fn=include_func),
    "contain": FuncDef(scope_fn=include_func),
    "contains": FuncDef(scope_fn=include_func),
    # other
    "match": FuncDef(scope_fn=match_func),
    "matches": FuncDef(scope_fn=match_func),
    "throws": FuncDef(scope_fn=throws_func),
    "throw": FuncDef(scope_fn=throws_func),
    "raises": FuncDef(scope_fn=throws_func),
}

register_builtin_funcs(CORE_FUNCS)

__all__ = [
    "CORE_FUNCS",
    "callable_func",
    "deep_equal_func",
    "deep_strict_equal_func",
    "dict_func",
    "empty_func",
    "equal_func",
    "false_func",
    "has_property_func",
    "include_func",
    "instance_of_func",
    "list_func",
    "loose_equal",
    "match_func",
    "none_func",
    "number_func",
    "property_result_op",
    "strict_equal",
    "strict_equal_func",
    "strict_false_func",
    "strict_true_func",
    "string_func",
    "throws_func",
    "true_func",
    "truthy_func",
]
