#!/usr/bin/env python3
"""
Schema Adapters
Translate between canonical recipes and generated KubeJS recipe calls.

Adapters are instances of one class, parametrised by the family's call path
and a shared positional layout, and looked up in a registry keyed by recipe
type. Decoding is best-effort: text that does not have the expected call
shape comes back as a DecodeFailure carrying the original text.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Tuple, Union

from data_models import (
    Recipe, IngredientRef, ResultRef, DecodeFailure, EncodeError,
    UnknownRecipeTypeError, display_name_for
)
from script_tokenizer import (
    IDENTIFIER_START, parse_invocation, parse_statement, parse_stack, parse_string,
    parse_number, parse_literal, format_literal, format_stack, format_number,
    quote, split_top_level, split_pair, unwrap
)

RECEIVER = "event"
DEFAULT_NAMESPACE = "minecraft"
RESERVED_CHAIN_NAMES = {"id", "merge"}
INDENT = "  "

@dataclass
class DecodedParts:
    """What a layout extracted from the positional arguments"""
    ingredients: List[IngredientRef] = field(default_factory=list)
    results: List[ResultRef] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)

# Shared argument helpers

def _is_identifier(name: str) -> bool:
    return bool(name) and bool(IDENTIFIER_START.match(name[0])) and all(
        c.isalnum() or c in "_$" for c in name)

def format_list(items: List[str]) -> str:
    if not items:
        return "[]"
    body = ",\n".join(INDENT + item for item in items)
    return f"[\n{body}\n]"

def ingredient_text(ingredient: IngredientRef) -> str:
    identifier = ingredient.identifier
    if not identifier:
        raise EncodeError("ingredient has neither an item nor a tag")
    return format_stack(identifier, ingredient.count, fluid=ingredient.fluid)

def result_text(result: ResultRef) -> str:
    if not result.item:
        raise EncodeError("result has no identifier")
    return format_stack(result.item, result.count, result.chance, result.fluid)

def parse_ingredient(token: str) -> Optional[IngredientRef]:
    stack = parse_stack(token)
    if stack is None or stack.chance is not None:
        return None
    return IngredientRef.of(stack.identifier, stack.count, fluid=stack.fluid)

def parse_result(token: str) -> Optional[ResultRef]:
    stack = parse_stack(token)
    if stack is None:
        return None
    return ResultRef(stack.identifier, stack.count, stack.chance, stack.fluid)

def parse_list(token: str) -> Optional[List[str]]:
    inner = unwrap(token, '[')
    if inner is None:
        return None
    return split_top_level(inner)

def _single(items: list, what: str, recipe: Recipe):
    if len(items) != 1:
        raise EncodeError(f"{recipe.recipe_type} needs exactly one {what}, got {len(items)}")
    return items[0]

def _parse_all(tokens: List[str], parser, what: str) -> Union[list, str]:
    parsed = []
    for token in tokens:
        value = parser(token)
        if value is None:
            return f"could not parse {what} {token!r}"
        parsed.append(value)
    return parsed

# Layouts

class CallLayout:
    """Positional argument shape shared by one or more recipe families"""

    name = ""
    consumed_properties: Tuple[str, ...] = ()

    def encode_args(self, recipe: Recipe) -> List[str]:
        raise NotImplementedError

    def decode_args(self, args: List[str]) -> Union[DecodedParts, str]:
        """Return the decoded parts, or a failure reason"""
        raise NotImplementedError

    def _expect_count(self, args: List[str], minimum: int, maximum: Optional[int] = None) -> Optional[str]:
        maximum = minimum if maximum is None else maximum
        if not minimum <= len(args) <= maximum:
            expected = str(minimum) if minimum == maximum else f"{minimum}-{maximum}"
            return f"expected {expected} arguments for {self.name} layout, found {len(args)}"
        return None

class OutputInputLayout(CallLayout):
    """(result, ingredient), e.g. event.smelting('out', 'in')"""

    name = "output_input"

    def encode_args(self, recipe):
        return [result_text(_single(recipe.results, "result", recipe)),
                ingredient_text(_single(recipe.ingredients, "ingredient", recipe))]

    def decode_args(self, args):
        problem = self._expect_count(args, 2)
        if problem:
            return problem
        result = parse_result(args[0])
        ingredient = parse_ingredient(args[1])
        if result is None:
            return f"could not parse result {args[0]!r}"
        if ingredient is None:
            return f"could not parse ingredient {args[1]!r}"
        return DecodedParts([ingredient], [result])

class OutputInputsLayout(CallLayout):
    """(result, [ingredients]), e.g. event.shapeless('out', ['a', 'b'])"""

    name = "output_inputs"

    def encode_args(self, recipe):
        return [result_text(_single(recipe.results, "result", recipe)),
                format_list([ingredient_text(i) for i in recipe.ingredients])]

    def decode_args(self, args):
        problem = self._expect_count(args, 2)
        if problem:
            return problem
        result = parse_result(args[0])
        if result is None:
            return f"could not parse result {args[0]!r}"
        tokens = parse_list(args[1])
        if tokens is None:
            return "second argument is not an ingredient list"
        ingredients = _parse_all(tokens, parse_ingredient, "ingredient")
        if isinstance(ingredients, str):
            return ingredients
        return DecodedParts(ingredients, [result])

class OutputsInputLayout(CallLayout):
    """([results], ingredient), e.g. event.recipes.create.milling([...], 'in')"""

    name = "outputs_input"

    def encode_args(self, recipe):
        return [format_list([result_text(r) for r in recipe.results]),
                ingredient_text(_single(recipe.ingredients, "ingredient", recipe))]

    def decode_args(self, args):
        problem = self._expect_count(args, 2)
        if problem:
            return problem
        tokens = parse_list(args[0])
        if tokens is None:
            return "first argument is not a result list"
        results = _parse_all(tokens, parse_result, "result")
        if isinstance(results, str):
            return results
        ingredient = parse_ingredient(args[1])
        if ingredient is None:
            return f"could not parse ingredient {args[1]!r}"
        return DecodedParts([ingredient], results)

class OutputsInputsLayout(CallLayout):
    """([results], [ingredients]), e.g. event.recipes.thermal.smelter"""

    name = "outputs_inputs"

    def encode_args(self, recipe):
        return [format_list([result_text(r) for r in recipe.results]),
                format_list([ingredient_text(i) for i in recipe.ingredients])]

    def decode_args(self, args):
        problem = self._expect_count(args, 2)
        if problem:
            return problem
        result_tokens = parse_list(args[0])
        ingredient_tokens = parse_list(args[1])
        if result_tokens is None or ingredient_tokens is None:
            return "expected a result list and an ingredient list"
        results = _parse_all(result_tokens, parse_result, "result")
        if isinstance(results, str):
            return results
        ingredients = _parse_all(ingredient_tokens, parse_ingredient, "ingredient")
        if isinstance(ingredients, str):
            return ingredients
        return DecodedParts(ingredients, results)

class ShapedLayout(CallLayout):
    """(result, [pattern rows], {key: ingredient})

    Each ingredient carries its grid symbol in metadata['key'] and the rows
    live in properties['pattern'].
    """

    name = "shaped"
    consumed_properties = ("pattern",)

    def encode_args(self, recipe):
        pattern = recipe.properties.get("pattern")
        if not isinstance(pattern, list) or not all(isinstance(row, str) for row in pattern):
            raise EncodeError(f"{recipe.recipe_type} needs a 'pattern' list of rows")
        entries = []
        for ingredient in recipe.ingredients:
            symbol = ingredient.metadata.get("key")
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise EncodeError(f"shaped ingredient {ingredient.identifier!r} has no single-character key")
            label = symbol if _is_identifier(symbol) else quote(symbol)
            entries.append(f"{label}: {ingredient_text(ingredient)}")
        key_text = "{\n" + ",\n".join(INDENT + entry for entry in entries) + "\n}" if entries else "{}"
        return [result_text(_single(recipe.results, "result", recipe)),
                format_list([quote(row) for row in pattern]),
                key_text]

    def decode_args(self, args):
        problem = self._expect_count(args, 3)
        if problem:
            return problem
        result = parse_result(args[0])
        if result is None:
            return f"could not parse result {args[0]!r}"
        row_tokens = parse_list(args[1])
        if row_tokens is None:
            return "second argument is not a pattern list"
        rows = [parse_string(token) for token in row_tokens]
        if any(row is None for row in rows):
            return "pattern rows must be string literals"
        key_body = unwrap(args[2], '{')
        if key_body is None:
            return "third argument is not a key object"
        ingredients = []
        for entry in split_top_level(key_body):
            pair = split_pair(entry)
            if pair is None:
                return f"malformed key entry {entry!r}"
            symbol = parse_string(pair[0]) if pair[0][:1] in "'\"" else pair[0]
            if not symbol or len(symbol) != 1:
                return f"key symbol {pair[0]!r} is not a single character"
            ingredient = parse_ingredient(pair[1])
            if ingredient is None:
                return f"could not parse ingredient {pair[1]!r}"
            ingredient.metadata["key"] = symbol
            ingredients.append(ingredient)
        return DecodedParts(ingredients, [result], {"pattern": rows})

class SmithingLayout(CallLayout):
    """(result, base, addition[, template])"""

    name = "smithing"

    def encode_args(self, recipe):
        if len(recipe.ingredients) not in (2, 3):
            raise EncodeError("smithing needs base, addition and optionally a template")
        return ([result_text(_single(recipe.results, "result", recipe))] +
                [ingredient_text(i) for i in recipe.ingredients])

    def decode_args(self, args):
        problem = self._expect_count(args, 3, 4)
        if problem:
            return problem
        result = parse_result(args[0])
        if result is None:
            return f"could not parse result {args[0]!r}"
        ingredients = _parse_all(args[1:], parse_ingredient, "ingredient")
        if isinstance(ingredients, str):
            return ingredients
        return DecodedParts(ingredients, [result])

class CookingPotLayout(CallLayout):
    """([ingredients], result[, container[, experience[, cookingTime]]])"""

    name = "cooking_pot"
    consumed_properties = ("container", "experience", "cookingTime")

    def encode_args(self, recipe):
        args = [format_list([ingredient_text(i) for i in recipe.ingredients]),
                result_text(_single(recipe.results, "result", recipe))]
        trailing = [recipe.properties.get(key) for key in self.consumed_properties]
        while trailing and trailing[-1] is None:
            trailing.pop()
        if None in trailing:
            raise EncodeError("cooking pot arguments are positional; set container and experience before cookingTime")
        if trailing and not isinstance(trailing[0], str):
            raise EncodeError("cooking pot container must be an item id string")
        if any(isinstance(value, bool) or not isinstance(value, (int, float)) for value in trailing[1:]):
            raise EncodeError("cooking pot experience and cookingTime must be numbers")
        if trailing:
            args.append(quote(trailing[0]))
            args.extend(format_number(value) for value in trailing[1:])
        return args

    def decode_args(self, args):
        problem = self._expect_count(args, 2, 5)
        if problem:
            return problem
        tokens = parse_list(args[0])
        if tokens is None:
            return "first argument is not an ingredient list"
        ingredients = _parse_all(tokens, parse_ingredient, "ingredient")
        if isinstance(ingredients, str):
            return ingredients
        result = parse_result(args[1])
        if result is None:
            return f"could not parse result {args[1]!r}"
        properties: Dict[str, Any] = {}
        if len(args) > 2:
            container = parse_string(args[2])
            if container is None:
                return "container must be a string literal"
            properties["container"] = container
        for key, token in zip(self.consumed_properties[1:], args[3:]):
            value = parse_number(token)
            if value is None:
                return f"{key} must be a number, found {token!r}"
            properties[key] = value
        return DecodedParts(ingredients, [result], properties)

class CuttingBoardLayout(CallLayout):
    """(ingredient, [results], tool); the tool rides on the ingredient slot"""

    name = "cutting_board"

    def encode_args(self, recipe):
        ingredient = _single(recipe.ingredients, "ingredient", recipe)
        tool = ingredient.metadata.get("tool")
        if not tool:
            raise EncodeError("cutting board ingredient needs a 'tool' in its metadata")
        return [ingredient_text(ingredient),
                format_list([result_text(r) for r in recipe.results]),
                quote(tool)]

    def decode_args(self, args):
        problem = self._expect_count(args, 3)
        if problem:
            return problem
        ingredient = parse_ingredient(args[0])
        if ingredient is None:
            return f"could not parse ingredient {args[0]!r}"
        tokens = parse_list(args[1])
        if tokens is None:
            return "second argument is not a result list"
        results = _parse_all(tokens, parse_result, "result")
        if isinstance(results, str):
            return results
        tool = parse_string(args[2])
        if not tool:
            return "tool must be a string literal"
        ingredient.metadata["tool"] = tool
        return DecodedParts([ingredient], results)

class SequencedAssemblyLayout(CallLayout):
    """([results], ingredient, [steps]); steps are nested Create calls

    properties['sequence'] holds the steps as dicts: deploying with 'item',
    filling with 'fluid' and 'amount', pressing and cutting bare.
    """

    name = "sequenced_assembly"
    consumed_properties = ("sequence",)
    step_prefix = "event.recipes.create."

    def _step_text(self, step: Dict[str, Any], transitional: str) -> str:
        step_type = step.get("type")
        target = quote(transitional)
        if step_type == "deploying" and step.get("item"):
            inputs = format_stack(step["item"])
            return f"{self.step_prefix}deploying({target}, [{target}, {inputs}])"
        if step_type in ("pressing", "cutting"):
            return f"{self.step_prefix}{step_type}({target}, {target})"
        if step_type == "filling" and step.get("fluid"):
            fluid = format_stack(step["fluid"], int(step.get("amount", 250)), fluid=True)
            return f"{self.step_prefix}filling({target}, [{target}, {fluid}])"
        raise EncodeError(f"unsupported sequenced assembly step {step!r}")

    def encode_args(self, recipe):
        steps = recipe.properties.get("sequence")
        if not isinstance(steps, list):
            raise EncodeError("sequenced assembly needs a 'sequence' list of steps")
        transitional = recipe.properties.get("transitionalItem")
        if steps and not transitional:
            raise EncodeError("sequenced assembly steps need a 'transitionalItem'")
        return [format_list([result_text(r) for r in recipe.results]),
                ingredient_text(_single(recipe.ingredients, "ingredient", recipe)),
                format_list([self._step_text(step, transitional) for step in steps])]

    def _decode_step(self, token: str) -> Union[Dict[str, Any], str]:
        invocation = parse_invocation(token)
        if invocation is None or invocation.chain or not invocation.callee.startswith(self.step_prefix):
            return f"unrecognised assembly step {token!r}"
        step_type = invocation.callee[len(self.step_prefix):]
        args = invocation.args
        if step_type in ("pressing", "cutting") and len(args) == 2:
            return {"type": step_type}
        if step_type in ("deploying", "filling") and len(args) == 2:
            inputs = parse_list(args[1])
            stack = parse_stack(inputs[1]) if inputs and len(inputs) == 2 else None
            if stack is None:
                return f"could not read the applied input of {token!r}"
            if step_type == "deploying" and not stack.fluid:
                return {"type": "deploying", "item": stack.identifier}
            if step_type == "filling" and stack.fluid:
                return {"type": "filling", "fluid": stack.identifier, "amount": stack.count}
        return f"unrecognised assembly step {token!r}"

    def decode_args(self, args):
        problem = self._expect_count(args, 3)
        if problem:
            return problem
        result_tokens = parse_list(args[0])
        if result_tokens is None:
            return "first argument is not a result list"
        results = _parse_all(result_tokens, parse_result, "result")
        if isinstance(results, str):
            return results
        ingredient = parse_ingredient(args[1])
        if ingredient is None:
            return f"could not parse ingredient {args[1]!r}"
        step_tokens = parse_list(args[2])
        if step_tokens is None:
            return "third argument is not a step list"
        steps = []
        for token in step_tokens:
            step = self._decode_step(token)
            if isinstance(step, str):
                return step
            steps.append(step)
        return DecodedParts([ingredient], results, {"sequence": steps})

OUTPUT_INPUT = OutputInputLayout()
OUTPUT_INPUTS = OutputInputsLayout()
OUTPUTS_INPUT = OutputsInputLayout()
OUTPUTS_INPUTS = OutputsInputsLayout()
SHAPED = ShapedLayout()
SMITHING = SmithingLayout()
COOKING_POT = CookingPotLayout()
CUTTING_BOARD = CuttingBoardLayout()
SEQUENCED_ASSEMBLY = SequencedAssemblyLayout()

class SchemaAdapter:
    """Encodes and decodes one recipe family"""

    def __init__(self, recipe_type: str, method: str, layout: CallLayout,
                 chain_order: Tuple[str, ...] = (), aliases: Tuple[str, ...] = ()):
        self.recipe_type = recipe_type
        self.method = method
        self.layout = layout
        self.chain_order = chain_order
        self.aliases = aliases  # accepted when decoding, never emitted
        self.logger = logging.getLogger(__name__)

    @property
    def callee(self) -> str:
        return f"{RECEIVER}.{self.method}"

    @property
    def methods(self) -> Tuple[str, ...]:
        return (self.method,) + tuple(self.aliases)

    def __repr__(self):
        return f"SchemaAdapter({self.recipe_type!r}, {self.callee!r}, layout={self.layout.name!r})"

    def _chain_text(self, recipe: Recipe) -> str:
        remaining = {key: value for key, value in recipe.properties.items()
                     if key not in self.layout.consumed_properties}
        ordered = [key for key in self.chain_order if key in remaining]
        ordered += sorted(key for key in remaining if key not in self.chain_order)

        calls = []
        merged = {}
        for key in ordered:
            value = remaining[key]
            if key in RESERVED_CHAIN_NAMES or not _is_identifier(key):
                merged[key] = value
            elif value is True:
                calls.append(f".{key}()")
            else:
                calls.append(f".{key}({format_literal(value)})")
        if merged:
            calls.append(f".merge({format_literal(merged)})")
        if recipe.id:
            calls.append(f".id({quote(recipe.id)})")
        return "".join(calls)

    def encode(self, recipe: Recipe) -> str:
        """Generate the KubeJS call for a recipe; byte-identical for equal input"""
        if recipe.recipe_type != self.recipe_type:
            raise EncodeError(f"{self.recipe_type} adapter cannot encode a {recipe.recipe_type!r} recipe")
        args = self.layout.encode_args(recipe)
        return f"{self.callee}({', '.join(args)}){self._chain_text(recipe)}"

    def decode(self, text: str, registry=None) -> Union[Recipe, DecodeFailure]:
        """Recover a recipe from generated text; never raises for malformed input"""
        try:
            return self._decode(text, registry)
        except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
            self.logger.warning(f"Unexpected error decoding {self.recipe_type}: {e}")
            return DecodeFailure(text, f"could not decode: {e}", self.recipe_type)

    def _decode(self, text: str, registry) -> Union[Recipe, DecodeFailure]:
        invocation = parse_statement(text)
        if invocation is None:
            return DecodeFailure(text, "text is not a single recipe call", self.recipe_type)
        if invocation.callee not in {f"{RECEIVER}.{method}" for method in self.methods}:
            return DecodeFailure(text, f"expected {self.callee}(...), found {invocation.callee}(...)",
                                 self.recipe_type)

        parts = self.layout.decode_args(invocation.args)
        if isinstance(parts, str):
            return DecodeFailure(text, parts, self.recipe_type)

        recipe_id = ""
        properties = dict(parts.properties)
        for call in invocation.chain:
            if call.name == "id":
                value = parse_string(call.args[0]) if len(call.args) == 1 else None
                if not value:
                    return DecodeFailure(text, ".id() must hold one string literal", self.recipe_type)
                recipe_id = value
            elif call.name == "merge":
                value = parse_literal(call.args[0]) if len(call.args) == 1 else None
                if not isinstance(value, dict):
                    return DecodeFailure(text, ".merge() must hold one object", self.recipe_type)
                properties.update(value)
            elif not call.args:
                properties[call.name] = True
            elif len(call.args) == 1:
                properties[call.name] = parse_literal(call.args[0])
            else:
                properties[call.name] = [parse_literal(arg) for arg in call.args]

        for ingredient in parts.ingredients:
            ingredient.display_name = display_name_for(ingredient.identifier, registry)
        for result in parts.results:
            result.display_name = display_name_for(result.item, registry)

        self.logger.debug(f"Decoded {self.recipe_type} recipe {recipe_id or '<no id>'}")
        return Recipe(
            id=recipe_id,
            recipe_type=self.recipe_type,
            ingredients=parts.ingredients,
            results=parts.results,
            properties=properties,
            raw=text
        )

def normalize_recipe_type(recipe_type: str) -> str:
    """'smelting' -> 'minecraft:smelting'"""
    if recipe_type and ":" not in recipe_type:
        return f"{DEFAULT_NAMESPACE}:{recipe_type}"
    return recipe_type

class AdapterRegistry:
    """Schema adapters keyed by recipe type"""

    def __init__(self):
        self._adapters: Dict[str, SchemaAdapter] = {}
        self._by_method: Dict[str, SchemaAdapter] = {}
        self.logger = logging.getLogger(__name__)

    def register(self, adapter: SchemaAdapter) -> SchemaAdapter:
        if adapter.recipe_type in self._adapters:
            raise ValueError(f"An adapter for {adapter.recipe_type} is already registered")
        for method in adapter.methods:
            if method in self._by_method:
                raise ValueError(f"{RECEIVER}.{method} is already handled by {self._by_method[method].recipe_type}")
        self._adapters[adapter.recipe_type] = adapter
        for method in adapter.methods:
            self._by_method[method] = adapter
        self.logger.debug(f"Registered {adapter!r}")
        return adapter

    def __contains__(self, recipe_type: str) -> bool:
        return normalize_recipe_type(recipe_type) in self._adapters

    def recipe_types(self) -> List[str]:
        return list(self._adapters)

    def get(self, recipe_type: str) -> SchemaAdapter:
        adapter = self._adapters.get(normalize_recipe_type(recipe_type))
        if adapter is None:
            raise UnknownRecipeTypeError(recipe_type)
        return adapter

    def for_method(self, method: str) -> Optional[SchemaAdapter]:
        return self._by_method.get(method)

    def encode(self, recipe: Recipe) -> str:
        return self.get(recipe.recipe_type).encode(recipe)

    def decode(self, text: str, recipe_type: Optional[str] = None,
               registry=None) -> Union[Recipe, DecodeFailure]:
        """Decode with the named family, or pick the family from the call path"""
        if recipe_type is not None:
            return self.get(recipe_type).decode(text, registry)

        invocation = parse_invocation(text)
        if invocation is None or not invocation.callee.startswith(RECEIVER + "."):
            return DecodeFailure(text, "text does not start with an event recipe call")
        adapter = self.for_method(invocation.method)
        if adapter is None:
            return DecodeFailure(text, f"no adapter handles {invocation.callee}(...)")
        return adapter.decode(text, registry)

# (recipe type, KubeJS call path, layout, family chain keys)
DEFAULT_FAMILIES = [
    ("minecraft:crafting_shaped", "shaped", SHAPED, ()),
    ("minecraft:crafting_shapeless", "shapeless", OUTPUT_INPUTS, ()),
    ("minecraft:smelting", "smelting", OUTPUT_INPUT, ("xp", "cookingTime")),
    ("minecraft:blasting", "blasting", OUTPUT_INPUT, ("xp", "cookingTime")),
    ("minecraft:smoking", "smoking", OUTPUT_INPUT, ("xp", "cookingTime")),
    ("minecraft:campfire_cooking", "campfireCooking", OUTPUT_INPUT, ("xp", "cookingTime")),
    ("minecraft:stonecutting", "stonecutting", OUTPUT_INPUT, ()),
    ("minecraft:smithing", "smithing", SMITHING, ()),
    ("create:crushing", "recipes.create.crushing", OUTPUTS_INPUT, ("processingTime",)),
    ("create:milling", "recipes.create.milling", OUTPUTS_INPUT, ("processingTime",)),
    ("create:cutting", "recipes.create.cutting", OUTPUTS_INPUT, ("processingTime",)),
    ("create:pressing", "recipes.create.pressing", OUTPUT_INPUT, ()),
    ("create:mixing", "recipes.create.mixing", OUTPUT_INPUTS, ("heated", "superheated", "processingTime")),
    ("create:compacting", "recipes.create.compacting", OUTPUT_INPUTS, ("heated", "superheated", "processingTime")),
    ("create:deploying", "recipes.create.deploying", OUTPUT_INPUTS, ("keepHeldItem",)),
    ("create:item_application", "recipes.create.item_application", OUTPUT_INPUTS, ("keepHeldItem",)),
    ("create:filling", "recipes.create.filling", OUTPUT_INPUTS, ()),
    ("create:emptying", "recipes.create.emptying", OUTPUTS_INPUT, ()),
    ("create:sandpaper_polishing", "recipes.create.sandpaper_polishing", OUTPUT_INPUT, ()),
    ("create:mechanical_crafting", "recipes.create.mechanical_crafting", SHAPED, ()),
    ("create:sequenced_assembly", "recipes.create.sequenced_assembly", SEQUENCED_ASSEMBLY,
     ("transitionalItem", "loops")),
    ("farmersdelight:cooking", "recipes.farmersdelight.cooking", COOKING_POT, ()),
    ("farmersdelight:cutting", "recipes.farmersdelight.cutting", CUTTING_BOARD, ("sound",)),
    ("thermal:pulverizer", "recipes.thermal.pulverizer", OUTPUTS_INPUT, ("energy",)),
    ("thermal:smelter", "recipes.thermal.smelter", OUTPUTS_INPUTS, ("energy",)),
    ("mekanism:crushing", "recipes.mekanism.crushing", OUTPUT_INPUT, ()),
    ("mekanism:enriching", "recipes.mekanism.enriching", OUTPUT_INPUT, ()),
]

# Farmer's Delight 1.20.1 names
METHOD_ALIASES = {
    "farmersdelight:cooking": ("recipes.farmersdelight.cookingPot",),
    "farmersdelight:cutting": ("recipes.farmersdelight.cuttingBoard", "recipes.farmersdelight.cutting_board"),
}

def default_registry() -> AdapterRegistry:
    """Registry with every family the editor ships"""
    registry = AdapterRegistry()
    for recipe_type, method, layout, chain_order in DEFAULT_FAMILIES:
        registry.register(SchemaAdapter(recipe_type, method, layout, chain_order,
                                        METHOD_ALIASES.get(recipe_type, ())))
    return registry

def render_script(snippets: List[str]) -> str:
    """Wrap encoded recipe calls in a server script recipes event"""
    lines = ["ServerEvents.recipes(event => {"]
    for snippet in snippets:
        lines.extend(INDENT + line for line in snippet.splitlines())
        lines.append("")
    if len(lines) > 1:
        lines.pop()
    lines.append("})")
    return "\n".join(lines) + "\n"
