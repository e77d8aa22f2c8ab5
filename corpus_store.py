#!/usr/bin/env python3
"""
Corpus Store
Loads a recipe corpus from JSON files and KubeJS server scripts and writes
edited recipes back to where they came from
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from data_models import Recipe, DecodeFailure, EncodeError, UnknownRecipeTypeError
from schema_adapters import AdapterRegistry, INDENT, default_registry, render_script
from script_tokenizer import Scanner, iter_recipe_invocations

# event.* calls in a recipes block that are not recipe definitions
NON_RECIPE_METHODS = {"remove", "replaceInput", "replaceOutput", "forEachRecipe",
                      "findRecipes", "custom", "containsRecipe", "countRecipes"}
RECIPES_EVENT = "ServerEvents.recipes("
LOCATION_SEPARATOR = "#"
DEFAULT_SCRIPT = "harmonizer_recipes.js"

@dataclass
class SaveResult:
    location: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

@dataclass
class LoadedFailure:
    """A snippet that could not be decoded, with where it was found"""
    location: str
    failure: DecodeFailure

def recipe_invocations(text: str):
    """Recipe-defining event calls of a script, in file order"""
    for invocation in iter_recipe_invocations(text):
        if invocation.method not in NON_RECIPE_METHODS:
            yield invocation

class CorpusStore:
    """File-backed corpus rooted at one directory"""

    def __init__(self, root: Path, adapters: Optional[AdapterRegistry] = None, item_registry=None):
        self.root = Path(root)
        self.adapters = adapters or default_registry()
        self.item_registry = item_registry
        self.decode_failures: List[LoadedFailure] = []
        self.logger = logging.getLogger(__name__)

    # Locations

    def _location(self, path: Path, index: Optional[int] = None) -> str:
        try:
            name = path.relative_to(self.root).as_posix()
        except ValueError:
            name = path.as_posix()
        return name if index is None else f"{name}{LOCATION_SEPARATOR}{index}"

    def resolve_location(self, location: str) -> Tuple[Path, Optional[int]]:
        """Split `file#n` into the file path and the entry ordinal"""
        index = None
        name, separator, suffix = location.rpartition(LOCATION_SEPARATOR)
        if separator and suffix.isdigit():
            location, index = name, int(suffix)
        path = Path(location)
        if not path.is_absolute():
            path = self.root / path
        return path, index

    # Loading

    def load_corpus(self) -> List[Recipe]:
        """Load every recipe under the root; unreadable files are skipped"""
        self.decode_failures = []
        corpus: List[Recipe] = []

        if not self.root.exists():
            self.logger.error(f"Corpus directory not found: {self.root}")
            return corpus

        self.logger.info(f"Scanning for recipes in: {self.root}")
        for path in sorted(self.root.rglob("*")):
            if path.is_file():
                corpus.extend(self.load_file(path))

        self.logger.info(f"Loaded {len(corpus)} recipes, {len(self.decode_failures)} snippets could not be decoded")
        return corpus

    def load_file(self, path: Path) -> List[Recipe]:
        """Recipes of one JSON document or server script; other files give none"""
        path = Path(path)
        if path.suffix == ".json":
            return self._load_json(path)
        if path.suffix == ".js":
            return self._load_script(path)
        return []

    def _load_json(self, path: Path) -> List[Recipe]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to parse {path}: {e}")
            return []

        if isinstance(data, dict) and isinstance(data.get('recipes'), list):
            entries = list(enumerate(data['recipes']))
        elif isinstance(data, list):
            entries = list(enumerate(data))
        elif isinstance(data, dict):
            entries = [(None, data)]
        else:
            self.logger.warning(f"Skipping {path}: not a recipe document")
            return []

        recipes = []
        for index, entry in entries:
            if not isinstance(entry, dict):
                self.logger.debug(f"Skipping non-object entry {index} in {path}")
                continue
            location = self._location(path, index)
            try:
                recipe = Recipe.from_dict(entry, location)
            except (ValueError, TypeError, AttributeError) as e:
                self.logger.warning(f"Could not read {location}: {e}")
                failure = DecodeFailure(json.dumps(entry, ensure_ascii=False), f"malformed recipe entry: {e}",
                                        entry.get('type') if isinstance(entry.get('type'), str) else None)
                self.decode_failures.append(LoadedFailure(location, failure))
                continue
            if not recipe.id:
                recipe.id = f"{path.stem}_{index or 0}"
            recipes.append(recipe)
        self.logger.debug(f"Parsed {len(recipes)} recipes from {path}")
        return recipes

    def _load_script(self, path: Path) -> List[Recipe]:
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            self.logger.error(f"Failed to read {path}: {e}")
            return []

        recipes = []
        for index, invocation in enumerate(recipe_invocations(text)):
            snippet = text[invocation.start:invocation.end]
            location = self._location(path, index)
            decoded = self.adapters.decode(snippet, registry=self.item_registry)
            if isinstance(decoded, DecodeFailure):
                self.logger.warning(f"Could not decode {location}: {decoded.reason}")
                self.decode_failures.append(LoadedFailure(location, decoded))
                continue
            decoded.source_location = location
            if not decoded.id:
                decoded.id = f"{path.stem}_{index}"
            recipes.append(decoded)
        self.logger.debug(f"Decoded {len(recipes)} recipes from {path}")
        return recipes

    # Saving

    def save(self, recipe: Recipe, source_location: Optional[str] = None) -> SaveResult:
        """Write one recipe back to its source, or to source_location

        On success the recipe's raw text and location are updated to what was
        written.
        """
        location = source_location or recipe.source_location or DEFAULT_SCRIPT
        path, index = self.resolve_location(location)
        try:
            if path.suffix == ".json":
                location = self._save_json(path, index, recipe)
            else:
                location = self._save_script(path, index, recipe)
        except (OSError, json.JSONDecodeError, EncodeError, UnknownRecipeTypeError) as e:
            self.logger.error(f"Failed to save {recipe.id} to {path}: {e}")
            return SaveResult(location, str(e))

        recipe.source_location = location
        self.logger.info(f"Saved {recipe.id} to {location}")
        return SaveResult(location)

    def _save_json(self, path: Path, index: Optional[int], recipe: Recipe) -> str:
        entry = recipe.to_dict()
        if index is None:
            document: Any = entry
            if path.exists():
                with open(path, 'r', encoding='utf-8') as f:
                    existing = json.load(f)
                if isinstance(existing, dict):
                    document = merge_entry(existing, entry)
        else:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
            entries = document.get('recipes') if isinstance(document, dict) else document
            if not isinstance(entries, list):
                raise json.JSONDecodeError("expected a list of recipes", "", 0)
            if index < len(entries):
                existing = entries[index]
                entries[index] = merge_entry(existing, entry) if isinstance(existing, dict) else entry
            else:
                entries.append(entry)
                index = len(entries) - 1

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")
        return self._location(path, index)

    def _save_script(self, path: Path, index: Optional[int], recipe: Recipe) -> str:
        snippet = self.adapters.encode(recipe)
        if path.exists():
            text = path.read_text(encoding='utf-8')
            span = self._find_span(text, index, recipe.raw)
            if span is not None:
                start, end = span
                text = text[:start] + snippet + text[end:]
            else:
                text, start = insert_snippet(text, snippet)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            text, start = insert_snippet("", snippet)
        path.write_text(text, encoding='utf-8')

        for position, invocation in enumerate(recipe_invocations(text)):
            if invocation.start >= start:
                recipe.raw = text[invocation.start:invocation.end]
                return self._location(path, position)
        recipe.raw = snippet
        return self._location(path, index)

    def _find_span(self, text: str, index: Optional[int], raw: Optional[str]) -> Optional[Tuple[int, int]]:
        invocations = list(recipe_invocations(text))
        if index is not None and index < len(invocations):
            candidate = invocations[index]
            if raw is None or same_code(text[candidate.start:candidate.end], raw):
                return candidate.start, candidate.end
        if raw:
            start = text.find(raw)
            if start != -1:
                return start, start + len(raw)
        return None

def merge_entry(existing: Dict[str, Any], entry: Dict[str, Any]) -> Dict[str, Any]:
    """Lay a recipe's dict form over the entry it was loaded from

    Keeps the stored key order and a single 'result' field where the entry
    used one. Stored keys missing from the new form were removed from the
    recipe and are dropped.
    """
    entry = dict(entry)
    results = entry.get('results', [])
    if 'result' in existing and 'results' not in existing and len(results) == 1:
        single = entry.pop('results')[0]
        if isinstance(existing['result'], str) and set(single) == {'item'}:
            single = single['item']
        entry['result'] = single
    merged = {key: entry[key] for key in existing if key in entry}
    merged.update(entry)
    return merged

def same_code(left: str, right: str) -> bool:
    """Equal up to whitespace layout"""
    return left.split() == right.split()

def insert_snippet(text: str, snippet: str) -> Tuple[str, int]:
    """Insert a recipe call at the end of the last recipes event block

    A script without such a block gets a new one appended. Returns the new
    text and the offset the inserted code starts at.
    """
    start = text.rfind(RECIPES_EVENT)
    if start != -1:
        scanner = Scanner(text, start + len(RECIPES_EVENT) - 1)
        if scanner.read_group() is not None:
            body_end = text.rfind("}", start, scanner.pos)
            if body_end != -1:
                before = text[:body_end].rstrip(" \t")
                if not before.endswith("\n"):
                    before += "\n"
                lines = "".join(INDENT + line + "\n" for line in snippet.splitlines())
                return before + lines + text[body_end:], len(before)
    prefix = text
    if prefix:
        prefix += "\n" if prefix.endswith("\n") else "\n\n"
    return prefix + render_script([snippet]), len(prefix)
