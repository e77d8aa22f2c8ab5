#!/usr/bin/env python3
"""
Report Writer
Renders conflict reports as text for people and JSON for tools
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from data_models import Recipe, RecipeConflict, ConflictReport, ConflictSeverity
from auto_fixer import AutoFixResult

SEVERITY_ICONS = {
    ConflictSeverity.ERROR: "🚨",
    ConflictSeverity.WARNING: "🔶",
}

class ConflictReportWriter:
    """Creates readable and machine-readable views of a conflict report"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def generate_conflict_report(self, report: ConflictReport, corpus: List[Recipe],
                                 fix_result: Optional[AutoFixResult] = None) -> str:
        """Generate a text report of every conflict and any planned renames"""
        recipes_by_id: Dict[str, List[Recipe]] = {}
        for recipe in corpus:
            recipes_by_id.setdefault(recipe.id, []).append(recipe)

        lines = []
        lines.append("🎯 RECIPE HARMONIZER - CONFLICT ANALYSIS REPORT")
        lines.append("=" * 70)
        lines.append(f"Analysis Date: {datetime.now().isoformat(timespec='seconds')}")
        lines.append("")

        errors = report.errors()
        warnings = report.warnings()
        lines.append("📊 SUMMARY")
        lines.append("-" * 30)
        lines.append(f"Total Recipes Analyzed: {len(corpus)}")
        lines.append(f"Duplicate IDs (errors): {len(errors)}")
        lines.append(f"Shared Outputs (warnings): {len(warnings)}")
        lines.append(f"Affected Recipes: {len(report.affected_recipes)}")
        lines.append("")

        if errors:
            lines.append("🍳 DUPLICATE RECIPE IDS")
            lines.append("=" * 45)
            for i, conflict in enumerate(errors, 1):
                lines.extend(self._conflict_lines(i, conflict))
                lines.append("")

        if warnings:
            lines.append("🔁 RECIPES SHARING AN OUTPUT")
            lines.append("=" * 45)
            for i, conflict in enumerate(warnings, 1):
                lines.extend(self._conflict_lines(i, conflict))
                for recipe_id in conflict.recipes:
                    for recipe in recipes_by_id.get(recipe_id, [])[:1]:
                        lines.append(f"     {self._recipe_line(recipe)}")
                lines.append("")

        if not report.conflicts:
            lines.append("✅ No conflicts found")
            lines.append("")

        if fix_result is not None:
            lines.extend(self._fix_lines(fix_result))

        lines.append("💡 RECOMMENDATIONS")
        lines.append("-" * 25)
        if errors:
            lines.append("⚠️  URGENT: Duplicate IDs overwrite each other; run `fix` to rename them")
        if warnings:
            lines.append("🔶 REVIEW: Shared outputs are often alternate recipes; confirm they are intended")
        lines.append("✅ TESTING: Reload the server scripts (/reload) after applying changes")
        lines.append("")

        lines.append("=" * 70)
        lines.append("Generated by Recipe Harmonizer")
        return "\n".join(lines)

    def _conflict_lines(self, number: int, conflict: RecipeConflict) -> List[str]:
        icon = SEVERITY_ICONS.get(conflict.severity, "❓")
        lines = [f"{number}. {icon} {conflict.message}",
                 f"   Severity: {conflict.severity.value.upper()}",
                 f"   Recipes: {', '.join(conflict.recipes)}"]
        if conflict.source_locations:
            lines.append(f"   Locations: {', '.join(conflict.source_locations)}")
        if conflict.suggestion:
            lines.append(f"   Suggestion: {conflict.suggestion}")
        return lines

    def _recipe_line(self, recipe: Recipe) -> str:
        ingredients = []
        for ingredient in recipe.ingredients:
            amount = f" x{ingredient.count}" if ingredient.count > 1 else ""
            ingredients.append(f"{ingredient.display_name or ingredient.identifier}{amount}")
        results = [result.display_name or result.item for result in recipe.results]
        return f"🔧 {recipe.id}: {' + '.join(ingredients) or '∅'} → {', '.join(results) or 'Unknown'}"

    def _fix_lines(self, fix_result: AutoFixResult) -> List[str]:
        lines = ["🛠️ PLANNED RENAMES", "-" * 30]
        if not fix_result.renames:
            lines.append("Nothing to rename")
        for rename in fix_result.renames:
            location = f" ({rename.source_location})" if rename.source_location else ""
            lines.append(f"   {rename.old_id} → {rename.new_id}{location}")
        for failure in fix_result.failures:
            lines.append(f"   ❌ {failure.original_id} (occurrence #{failure.index}): "
                         f"no free id after {failure.attempts} attempts")
        lines.append("")
        return lines

    def export_report_json(self, report: ConflictReport, output_file: Path,
                           fix_result: Optional[AutoFixResult] = None) -> Path:
        """Write the report (and optional fix plan) as JSON"""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        data = report.to_dict()
        data['generated'] = datetime.now().isoformat(timespec='seconds')
        if fix_result is not None:
            data['fix'] = fix_result.to_dict()
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        self.logger.info(f"Exported conflict report to {output_file}")
        return output_file
