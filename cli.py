import argparse
import json
import sys
from pathlib import Path

from config.discovery import DiscoveryConfig
from config.role_priorities import ROLE_SOURCE_PRIORITY, ROLE_TYPES
from config.settings import get_settings
from models.hints import HintBundle
from pipelines.orchestrator import check_all_sources_health, discover_across_sources, source_stats
from services.search_executor import build_search_executor
from sources.catalog import SOURCE_CATALOG
from sources.registry import build_default_registry
from utils.logging_setup import init_logging
from utils.trace_logger import log_discovery_run


def _build_config(settings, args) -> DiscoveryConfig:
    return DiscoveryConfig.from_settings(
        settings,
        max_sources=getattr(args, "max_sources", None),
        parallelism=getattr(args, "parallelism", None),
        max_queries=getattr(args, "max_queries", None),
        max_results=getattr(args, "max_results", None),
        min_confidence=getattr(args, "min_confidence", None),
        skip_unreliable=True if getattr(args, "skip_unreliable", False) else None,
    )


def _load_hints(args) -> HintBundle:
    if args.hints_file:
        data = json.loads(Path(args.hints_file).read_text(encoding="utf-8"))
        return HintBundle.model_validate(data)
    return HintBundle(
        external_id=args.external_id,
        profile_url=args.profile_url,
        name_hint=args.name,
        headline_hint=args.headline,
        location_hint=args.location,
        company_hint=args.company,
        role_type=args.role,
    )


def cmd_discover(args):
    settings = get_settings()
    if not args.hints_file and not args.external_id:
        print("Either --external-id or --hints-file is required", file=sys.stderr)
        return 2
    hints = _load_hints(args)
    config = _build_config(settings, args)
    registry = build_default_registry(build_search_executor(settings, config))

    result = discover_across_sources(hints, args.role or hints.role_type, registry, config)
    log_discovery_run(
        result,
        enabled=settings.discovery_trace,
        log_path=settings.discovery_trace_path,
        extras={"cli": True},
    )
    print(json.dumps(result.model_dump(by_alias=True, mode="json"), indent=2, ensure_ascii=False))
    return 0


def cmd_health(args):
    settings = get_settings()
    executor = build_search_executor(settings, _build_config(settings, args))
    providers = {p.name: p.health_check().model_dump(by_alias=True) for p in executor.providers}
    out = {"providers": providers}
    if args.sources:
        registry = build_default_registry(executor)
        out["sources"] = {k: v.model_dump(by_alias=True) for k, v in check_all_sources_health(registry).items()}
    print(json.dumps(out, indent=2))
    return 0 if any(p["healthy"] for p in providers.values()) else 1


def cmd_platforms(args):
    if args.role:
        names = ROLE_SOURCE_PRIORITY.get(args.role, [])
        out = [
            {"platform": p, "display_name": SOURCE_CATALOG[p].display_name, "base_weight": SOURCE_CATALOG[p].base_weight}
            for p in names
        ]
    else:
        out = source_stats(build_default_registry(executor=None))
    print(json.dumps(out, indent=2))
    return 0


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cross-platform identity discovery CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_disc = sub.add_parser("discover", help="Discover a person's accounts across platforms")
    p_disc.add_argument("--external-id", "-i", help="Slug of the person's known primary profile")
    p_disc.add_argument("--hints-file", help="JSON file with a hint bundle (camelCase keys)")
    p_disc.add_argument("--name", "-n", help="Full name hint")
    p_disc.add_argument("--headline", help="Headline hint, e.g. 'Staff Engineer at Acme'")
    p_disc.add_argument("--company", "-c", help="Company hint")
    p_disc.add_argument("--location", "-l", help="Location hint")
    p_disc.add_argument("--profile-url", help="Primary profile URL")
    p_disc.add_argument("--role", "-r", choices=list(ROLE_TYPES), help="Role type (default: general)")
    p_disc.add_argument("--max-sources", type=int, default=None, help=f"Default: {settings.discovery_max_sources}")
    p_disc.add_argument("--parallelism", type=int, default=None, help=f"Default: {settings.discovery_parallelism}")
    p_disc.add_argument("--max-queries", type=int, default=None, help=f"Default: {settings.discovery_max_queries}")
    p_disc.add_argument("--max-results", type=int, default=None, help=f"Default: {settings.discovery_max_results}")
    p_disc.add_argument("--min-confidence", type=float, default=None,
                        help=f"Default: {settings.discovery_min_confidence}")
    p_disc.add_argument("--skip-unreliable", action="store_true", help="Skip frequently blocked platforms")
    p_disc.set_defaults(func=cmd_discover)

    p_health = sub.add_parser("health", help="Check search provider health")
    p_health.add_argument("--sources", action="store_true", help="Also report per-source health")
    p_health.set_defaults(func=cmd_health)

    p_plat = sub.add_parser("platforms", help="List supported platforms")
    p_plat.add_argument("--role", "-r", choices=list(ROLE_TYPES), help="Only the platforms queried for a role")
    p_plat.set_defaults(func=cmd_platforms)
    return parser


def main(argv=None):
    settings = get_settings()
    init_logging(settings.log_level)
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
