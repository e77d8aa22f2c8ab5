#!/usr/bin/env python3
"""
Data Models
Defines the canonical recipe representation, conflict reports and result types
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Set, Union
from enum import Enum

TAG_PREFIX = "#"
NAMESPACE_SEPARATOR = ":"
UNKNOWN_OUTPUT = "Unknown"
# Top-level JSON keys read into Recipe fields rather than properties
RECIPE_FIELDS = {"id", "type", "ingredients", "result", "results", "properties"}

class ConflictSeverity(Enum):
    """Severity levels for conflicts"""
    ERROR = "error"          # Must be fixed, recipes overwrite each other
    WARNING = "warning"      # Often intentional (alternate recipes)

class ConflictType(Enum):
    """Kinds of cross-recipe conflicts"""
    DUPLICATE_ID = "duplicate_id"
    DUPLICATE_OUTPUT = "duplicate_output"

class EncodeError(ValueError):
    """Recipe does not fit the call shape of the family asked to encode it"""

class UnknownRecipeTypeError(KeyError):
    """No schema adapter is registered for a recipe type"""

@dataclass
class IngredientRef:
    """One ingredient slot: a concrete item/fluid or a tag reference"""
    item: Optional[str] = None
    tag: Optional[str] = None      # keeps the leading '#'
    count: int = 1                 # millibuckets for fluids
    fluid: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
    display_name: Optional[str] = field(default=None, compare=False)

    @property
    def identifier(self) -> str:
        """The carrier of this slot's value, tag or item"""
        return self.tag or self.item or ""

    def matches(self, identifier: str) -> bool:
        return bool(identifier) and (self.item == identifier or self.tag == identifier)

    @classmethod
    def of(cls, identifier: str, count: int = 1, **kwargs) -> "IngredientRef":
        """Build an ingredient, routing '#'-prefixed identifiers to the tag field"""
        if identifier.startswith(TAG_PREFIX):
            return cls(tag=identifier, count=count, **kwargs)
        return cls(item=identifier, count=count, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.fluid:
            data['fluid'] = self.identifier
            data['amount'] = self.count
        elif self.tag:
            data['tag'] = self.tag
        else:
            data['item'] = self.item
        if not self.fluid and self.count != 1:
            data['count'] = self.count
        if self.metadata:
            data['metadata'] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Union[str, Dict[str, Any]]) -> "IngredientRef":
        if isinstance(data, str):
            return cls.of(data)
        if data.get('fluid'):
            return cls.of(data['fluid'], int(data.get('amount', data.get('count', 1000))),
                          fluid=True, metadata=dict(data.get('metadata', {})))
        tag = data.get('tag')
        if tag and not tag.startswith(TAG_PREFIX):
            tag = TAG_PREFIX + tag
        return cls(
            item=data.get('item'),
            tag=tag,
            count=int(data.get('count', 1)),
            metadata=dict(data.get('metadata', {}))
        )

@dataclass
class ResultRef:
    """One produced stack, optionally probabilistic"""
    item: str
    count: int = 1
    chance: Optional[float] = None
    fluid: bool = False
    display_name: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'fluid': self.item} if self.fluid else {'item': self.item}
        if self.fluid:
            data['amount'] = self.count
        elif self.count != 1:
            data['count'] = self.count
        if self.chance is not None:
            data['chance'] = self.chance
        return data

    @classmethod
    def from_dict(cls, data: Union[str, Dict[str, Any]]) -> Optional["ResultRef"]:
        """Parse a result; returns None when no identifier can be found"""
        if isinstance(data, str):
            return cls(item=data) if data else None
        if not isinstance(data, dict):
            return None
        if data.get('fluid'):
            return cls(item=data['fluid'], count=int(data.get('amount', data.get('count', 1000))),
                       chance=data.get('chance'), fluid=True)
        item = data.get('item') or data.get('id')
        if not item:
            return None
        chance = data.get('chance')
        return cls(item=item, count=int(data.get('count', 1)),
                   chance=float(chance) if chance is not None else None)

@dataclass
class Recipe:
    """Canonical, format-agnostic recipe"""
    id: str
    recipe_type: str
    ingredients: List[IngredientRef] = field(default_factory=list)
    results: List[ResultRef] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)

    # Not part of recipe identity
    source_location: Optional[str] = field(default=None, compare=False)
    raw: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.id) and bool(self.results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization

        Properties sit beside the recipe fields, as in datapack JSON; only
        keys that would shadow a recipe field go in a nested 'properties'.
        """
        data: Dict[str, Any] = {
            'id': self.id,
            'type': self.recipe_type,
            'ingredients': [ingredient.to_dict() for ingredient in self.ingredients],
            'results': [result.to_dict() for result in self.results],
        }
        shadowed = {}
        for key, value in self.properties.items():
            if key in RECIPE_FIELDS:
                shadowed[key] = value
            else:
                data[key] = value
        if shadowed:
            data['properties'] = shadowed
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_location: Optional[str] = None) -> "Recipe":
        """Build a recipe from stored JSON, tolerating incomplete entries

        An explicit single 'result' field takes precedence over the 'results'
        list and becomes the first result. Top-level keys that are not recipe
        fields (experience, cookingtime, pattern, conditions...) are kept as
        properties. Raises ValueError, TypeError or AttributeError for
        entries whose fields have the wrong shape.
        """
        results: List[ResultRef] = []
        explicit = data.get('result')
        if explicit is not None:
            parsed = ResultRef.from_dict(explicit)
            if parsed:
                results.append(parsed)
        for entry in data.get('results') or []:
            parsed = ResultRef.from_dict(entry)
            if parsed:
                results.append(parsed)

        ingredients = [IngredientRef.from_dict(entry) for entry in data.get('ingredients') or []
                       if isinstance(entry, (str, dict))]

        nested = data.get('properties') or {}
        if not isinstance(nested, dict):
            raise TypeError(f"'properties' must be an object, not {type(nested).__name__}")
        properties = dict(nested)
        properties.update((key, value) for key, value in data.items() if key not in RECIPE_FIELDS)

        return cls(
            id=str(data.get('id') or ''),
            recipe_type=str(data.get('type') or ''),
            ingredients=ingredients,
            results=results,
            properties=properties,
            source_location=source_location or data.get('filePath')
        )

@dataclass
class DecodeFailure:
    """Text did not match the call shape of the targeted family"""
    text: str
    reason: str
    recipe_type: Optional[str] = None

    def __bool__(self) -> bool:
        return False

@dataclass
class InvalidTransform:
    """A modifier was given arguments that would break a model invariant"""
    transform: str
    reason: str

@dataclass
class TransformResult:
    """Outcome of a Recipe Modifier transform"""
    recipe: Recipe
    error: Optional[InvalidTransform] = None

    @property
    def ok(self) -> bool:
        return self.error is None

@dataclass
class IdCollisionExhausted:
    """Auto-fix gave up finding a free id for one occurrence"""
    original_id: str
    index: int
    attempts: int
    source_location: Optional[str] = None

@dataclass
class RecipeConflict:
    """A single cross-recipe conflict"""
    conflict_type: ConflictType
    severity: ConflictSeverity
    recipes: List[str]
    message: str
    suggestion: str = ""
    output_id: Optional[str] = None
    source_locations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.conflict_type.value,
            'severity': self.severity.value,
            'recipes': list(self.recipes),
            'message': self.message,
            'suggestion': self.suggestion,
            'output_id': self.output_id,
            'source_locations': list(self.source_locations)
        }

@dataclass
class ConflictReport:
    """All conflicts found in one corpus snapshot"""
    conflicts: List[RecipeConflict] = field(default_factory=list)
    affected_recipes: Set[str] = field(default_factory=set)

    def errors(self) -> List[RecipeConflict]:
        return [c for c in self.conflicts if c.severity == ConflictSeverity.ERROR]

    def warnings(self) -> List[RecipeConflict]:
        return [c for c in self.conflicts if c.severity == ConflictSeverity.WARNING]

    def duplicate_ids(self) -> List[str]:
        """Ids flagged by duplicate_id conflicts, in detection order"""
        return [c.recipes[0] for c in self.conflicts
                if c.conflict_type == ConflictType.DUPLICATE_ID]

    @property
    def has_errors(self) -> bool:
        return any(c.severity == ConflictSeverity.ERROR for c in self.conflicts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'conflicts': [conflict.to_dict() for conflict in self.conflicts],
            'affected_recipes': sorted(self.affected_recipes),
            'summary': {
                'errors': len(self.errors()),
                'warnings': len(self.warnings()),
                'affected': len(self.affected_recipes)
            }
        }

# Utility functions for working with data models

def is_tag(identifier: str) -> bool:
    return identifier.startswith(TAG_PREFIX)

def primary_output(recipe: Recipe) -> str:
    """Output used for duplicate-output grouping; never raises"""
    for result in recipe.results[:1]:
        if result.item:
            return result.item
    return UNKNOWN_OUTPUT

def split_identifier(identifier: str) -> Optional[tuple]:
    """Split 'namespace:path' into its parts, None when there is no namespace"""
    bare = identifier[len(TAG_PREFIX):] if is_tag(identifier) else identifier
    if NAMESPACE_SEPARATOR not in bare:
        return None
    namespace, path = bare.split(NAMESPACE_SEPARATOR, 1)
    return namespace, path

def display_name_for(identifier: str, registry=None) -> str:
    """Human-readable name; registry misses fall back to the identifier's path"""
    if registry is not None and identifier and not is_tag(identifier):
        entry = registry.resolve(identifier)
        if entry is not None:
            return entry.display_name
    parts = split_identifier(identifier)
    if parts and parts[1]:
        return parts[1]
    return identifier

def severity_to_color(severity: ConflictSeverity) -> str:
    """Convert severity to color for visualization"""
    color_map = {
        ConflictSeverity.ERROR: "#FF0000",    # Red
        ConflictSeverity.WARNING: "#FFCC00",  # Yellow
    }
    return color_map.get(severity, "#808080")  # Gray default
