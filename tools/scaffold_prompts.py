"""Scaffold classify-equipment prompt files for a new provider."""

from __future__ import annotations

import argparse
import shutil
from pathlib import Path

PROMPT_REL_FILES = [
    Path("system/classify-equipment.txt"),
    Path("user/classify-equipment.txt"),
]

STUB_SYSTEM = """You classify one equipment into a 4-level hierarchy ({provider}).
Respond with a single JSON object:
{{"domain": ..., "type": ..., "category": ..., "subcategory": ..., "confidence": 0.0, "reasoning": "..."}}
Use exact names from the provided list, or null.
"""

STUB_USER = """Equipment Details:
{{{{equipment_details}}}}

Keywords detected: {{{{keywords}}}}

Available Equipment Types (4-level hierarchy):
{{{{hierarchy_summary}}}}

{{{{relevant_types}}}}
"""


# scaffold prompt files with stubs that keep every placeholder
def scaffold_empty(dest_root: Path, provider: str, force: bool) -> None:
    if dest_root.exists() and any(dest_root.iterdir()) and not force:
        raise SystemExit(f"Destination exists and is not empty: {dest_root} (use --force)")

    for rel in PROMPT_REL_FILES:
        path = dest_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists() and not force:
            continue
        stub = STUB_SYSTEM if rel.parts[0] == "system" else STUB_USER
        path.write_text(stub.format(provider=provider), encoding="utf-8")


# scaffold prompt files by copying an existing provider (or default/) folder
def scaffold_from_template(prompts_root: Path, provider: str, template: str, force: bool) -> None:
    src = prompts_root / template
    dest = prompts_root / provider

    if not src.exists():
        raise SystemExit(f"Template prompt folder not found: {src}")

    if dest.exists():
        if force:
            shutil.rmtree(dest)
        else:
            raise SystemExit(f"Destination exists: {dest} (use --force to overwrite)")

    shutil.copytree(src, dest)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--provider", required=True, help="Provider folder name (e.g., openai, anthropic, ollama)")
    ap.add_argument("--prompts-root", default="prompts", help="Prompts root directory (default: prompts)")
    ap.add_argument("--from", dest="template", default=None, help="Copy prompts from an existing folder (e.g. default)")
    ap.add_argument("--empty", action="store_true", help="Create folder structure with stub files")
    ap.add_argument("--force", action="store_true", help="Overwrite if destination exists")
    args = ap.parse_args()

    prompts_root = Path(args.prompts_root)
    dest_root = prompts_root / args.provider

    if args.template:
        scaffold_from_template(prompts_root, args.provider, args.template, args.force)
        print(f"Copied prompts from {args.template!r} -> {args.provider!r}: {dest_root}")
        return
    if args.empty:
        scaffold_empty(dest_root, args.provider, args.force)
        print(f"Scaffolded stub prompt tree at: {dest_root}")
        return

    raise SystemExit("Choose one: --from <folder> or --empty")


if __name__ == "__main__":
    main()
