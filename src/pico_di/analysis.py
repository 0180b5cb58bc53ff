import inspect
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Union, get_args, get_origin, Annotated


@dataclass(frozen=True)
class ParameterRequest:
    name: str
    annotation: Any = None
    positional: bool = True
    keyword: bool = True
    has_default: bool = False
    default: Any = None
    is_optional: bool = False


def _strip_annotated(ann: Any) -> Any:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        return args[0] if args else Any
    return ann


def _check_optional(ann: Any) -> Tuple[Any, bool]:
    origin = get_origin(ann)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(ann) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
        return Any, type(None) in get_args(ann)
    return ann, False


def _type_hints(target: Callable[..., Any]) -> Dict[str, Any]:
    fn = target.__init__ if inspect.isclass(target) else target
    try:
        return typing.get_type_hints(fn, include_extras=True)
    except Exception:
        return {}


def analyze_parameters(callable_obj: Callable[..., Any]) -> Tuple[ParameterRequest, ...]:
    """Describe the parameters the container has to supply to *callable_obj*.

    ``*args``/``**kwargs`` are skipped. String annotations are evaluated
    where possible; unresolvable ones are kept as plain strings.
    """
    try:
        sig = inspect.signature(callable_obj)
    except (ValueError, TypeError):
        return ()

    hints = _type_hints(callable_obj)
    plan: List[ParameterRequest] = []

    for name, param in sig.parameters.items():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        ann = hints.get(name, param.annotation)
        if ann is inspect.Parameter.empty:
            ann = None
        ann, is_optional = _check_optional(_strip_annotated(ann))

        plan.append(
            ParameterRequest(
                name=name,
                annotation=ann,
                positional=param.kind is not inspect.Parameter.KEYWORD_ONLY,
                keyword=param.kind is not inspect.Parameter.POSITIONAL_ONLY,
                has_default=param.default is not inspect.Parameter.empty,
                default=None if param.default is inspect.Parameter.empty else param.default,
                is_optional=is_optional,
            )
        )

    return tuple(plan)
