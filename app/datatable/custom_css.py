# datatable/custom_css.py
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import CustomClassesNotSetError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Equals:
    value: Any

    def test(self, candidate: Any) -> bool:
        # Strict comparison: True is not 1 and "1" is not 1.
        if not (_is_number(candidate) and _is_number(self.value)) and type(candidate) is not type(self.value):
            return False
        try:
            return bool(candidate == self.value)
        except (TypeError, ValueError):
            return False


@dataclass(frozen=True)
class Predicate:
    fn: Callable[[Any], bool]

    def test(self, candidate: Any) -> bool:
        return bool(self.fn(candidate))


CssRule = Union[Equals, Predicate]


class CustomClassMap:
    """Ordered mapping of CSS class names to the rule that enables them."""

    def __init__(self, rules: Optional[List[Tuple[str, CssRule]]] = None):
        self.rules: List[Tuple[str, CssRule]] = list(rules or [])

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "CustomClassMap":
        rules: List[Tuple[str, CssRule]] = []
        for class_name, rule in mapping.items():
            if isinstance(rule, (Equals, Predicate)):
                rules.append((class_name, rule))
            elif callable(rule):
                rules.append((class_name, Predicate(rule)))
            else:
                rules.append((class_name, Equals(rule)))
        return cls(rules)

    def classes_for(self, value: Any) -> Optional[str]:
        names = [name for name, rule in self.rules if rule.test(value)]
        return " ".join(names) if names else None


def use_custom_class(custom_css: Union[CustomClassMap, Dict[str, Any], None], value: Any) -> Optional[str]:
    if custom_css is None:
        raise CustomClassesNotSetError()
    if not isinstance(custom_css, CustomClassMap):
        custom_css = CustomClassMap.from_mapping(custom_css)
    return custom_css.classes_for(value)
