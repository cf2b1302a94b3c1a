"""
CLI entrypoint for equipment-type detection.

Subcommands:
- detect:   classify one equipment (name/brand/model/description) and print the result JSON
- path:     print the domain/type/category/subcategory names of a node id
- resolve:  resolve a (possibly partial) path of names to a node id
- summary:  print the hierarchy digest sent to the classifier
- keywords: print the keywords and relevant taxonomy paths found in a text

Every subcommand loads .env (if present), configs/detection.yaml and the taxonomy file.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import opik
from dotenv import load_dotenv
from opik import opik_context, track

from application import build_detection_context, detect_equipment_type
from domain.errors import NotFoundError
from domain.schemas import EquipmentDetails, HierarchyPath
from domain.taxonomy import ContextSummarizer, KeywordRelevanceFilter, TypeTree
from infrastructure.config import DetectionConfig, load_detection_config, load_taxonomy
from infrastructure.constants import DETECTION_FILE
from infrastructure.io import ensure_exists
from infrastructure.observability import configure_logging, make_run_tag, set_log_context
from infrastructure.prompting import PromptManager, PromptRole
from infrastructure.providers import make_adapter

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Equipment-type detection and taxonomy lookup")
    p.add_argument(
        "--config",
        type=str,
        default=str(DETECTION_FILE),
        help="Path to detection.yaml (default: configs/detection.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file (default: .env, skipped when absent)",
    )
    p.add_argument(
        "--mock",
        action="store_true",
        help="Use Mock adapter instead of calling a real provider.",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=LOG_LEVELS,
        help="Console log level",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional rotating log file (DEBUG level)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Suggest an equipment type for one equipment")
    detect.add_argument("--name", required=True)
    detect.add_argument("--brand", default="")
    detect.add_argument("--model", default="")
    detect.add_argument("--description", default=None)

    path = sub.add_parser("path", help="Print the hierarchy path of a node id")
    path.add_argument("node_id")

    resolve = sub.add_parser("resolve", help="Resolve a partial path of names to a node id")
    resolve.add_argument("--domain", default=None)
    resolve.add_argument("--type", default=None)
    resolve.add_argument("--category", default=None)
    resolve.add_argument("--subcategory", default=None)

    sub.add_parser("summary", help="Print the hierarchy digest")

    kw = sub.add_parser("keywords", help="Print keywords and relevant types found in a text")
    kw.add_argument("text")

    return p.parse_args(argv)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


@track(
    name="Equipment.detect.cli",
    type="general",
    metadata={"task": "equipment_type_detection"},
    capture_input=False,
    flush=True,
)
def _run_detect(cfg: DetectionConfig, tree: TypeTree, args: argparse.Namespace) -> None:
    if not args.mock:
        opik.configure()

    pm = PromptManager(prompts_root=cfg.prompts_root)
    system_prompt = pm.get_prompt(
        provider=cfg.provider,
        role=PromptRole.SYSTEM,
        cfg=cfg,
        override_path=cfg.system_prompt_path,
    )
    user_prompt = pm.get_prompt(
        provider=cfg.provider,
        role=PromptRole.USER,
        cfg=cfg,
        override_path=cfg.user_prompt_path,
    )

    opik_context.update_current_span(
        name=f"Equipment.detect.cli.{cfg.provider.value if not args.mock else 'mock'}_{cfg.model}",
        metadata={"provider": cfg.provider.value, "model": cfg.model, "mock": bool(args.mock)},
        prompts=[system_prompt, user_prompt],  # ty: ignore
    )

    logger.info("Initializing provider (provider=%s, model=%s)...", cfg.provider.value, cfg.model)
    adapter = make_adapter(cfg, use_mock=bool(args.mock))

    ctx = build_detection_context(
        cfg,
        tree=tree,
        adapter=adapter,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
    )
    equipment = EquipmentDetails(
        name=args.name,
        brand=args.brand,
        model=args.model,
        description=args.description,
    )
    result = detect_equipment_type(ctx, equipment)
    _print_json(result.model_dump(mode="json"))


def _run(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    ensure_exists(config_path, "detection.yaml")
    cfg = load_detection_config(config_path)
    set_log_context(provider=cfg.provider.value, model=cfg.model)

    logger.info("Loading equipment types from %s...", cfg.taxonomy_file)
    ensure_exists(cfg.taxonomy_file, "taxonomy file")
    tree = load_taxonomy(cfg.taxonomy_file, cfg.taxonomy_columns)

    if args.command == "detect":
        _run_detect(cfg, tree, args)
        return 0

    if args.command == "path":
        _print_json(tree.get_hierarchy_path(args.node_id).model_dump())
        return 0

    if args.command == "resolve":
        partial = HierarchyPath(
            domain=args.domain,
            type=args.type,
            category=args.category,
            subcategory=args.subcategory,
        )
        node_id = tree.resolve_id_from_path(partial)
        if node_id is None:
            logger.error("No equipment type matches path %r", partial.display() or "-")
            return 1
        print(node_id)
        return 0

    if args.command == "summary":
        print(ContextSummarizer(tree, ttl_s=cfg.summary_ttl_s).get_summary())
        return 0

    if args.command == "keywords":
        kw_filter = KeywordRelevanceFilter(cfg.keyword_categories)
        keywords = kw_filter.extract_keywords(args.text)
        relevant = kw_filter.filter_relevant(tree, keywords)
        _print_json(
            {
                "keywords": keywords,
                "relevant_types": [tree.get_hierarchy_path(n.id).display() for n in relevant],
            }
        )
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    configure_logging(
        log_file=Path(args.log_file) if args.log_file else None,
        console_level=getattr(logging, args.console_level),
    )

    run_id = f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{args.command}"
    set_log_context(run_id_full=run_id)
    logger.debug("Starting %s (run_tag=%s)", args.command, make_run_tag(run_id))

    try:
        return _run(args)
    except NotFoundError as e:
        logger.error("%s", e)
        return 1
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
