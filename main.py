import argparse
import json
import sys
from dataclasses import asdict
from typing import Optional
from moodshift.config.presets import VIBE_TEMPLATES
from moodshift.config.settings import ConfigManager, AppConfig, DEFAULT_CONFIG_PATH
from moodshift.data.schemas import MOOD_DIMENSIONS, MoodVector
from moodshift.data.validator import DataValidator
from moodshift.errors import MoodShiftError
from moodshift.services import MoodShiftServices
from moodshift.utils.logging import StructuredLogger
class MoodShiftApp:
    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_manager = ConfigManager()
        self.config: Optional[AppConfig] = None
        self.logger: Optional[StructuredLogger] = None
        self.services: Optional[MoodShiftServices] = None
        self.config_path = config_path
    def initialize(self) -> None:
        try:
            self.config = self.config_manager.load(self.config_path)
            self.logger = StructuredLogger(
                "moodshift.main",
                level=self.config.logging.level,
                fmt=self.config.logging.format
            )
            self.logger.log_config(asdict(self.config))
            self.services = MoodShiftServices.build(self.config, logger=self.logger)
            self.services.load_seed_data()
            self.logger.info("MoodShift initialized successfully")
        except (MoodShiftError, OSError, ValueError) as e:
            print(f"Failed to initialize MoodShift: {e}")
            sys.exit(1)
    def show_mood(self, user_id: str, timeline_days: Optional[int] = None) -> None:
        with self.logger.operation_context("MoodShiftApp", "show_mood", user_id=user_id):
            mood = self.services.mood.compute_or_get_mood(user_id)
            self._print_header(f"MOOD OF {user_id}")
            self._print_vector(mood)
            if timeline_days:
                print(f"\nTimeline (last {timeline_days} days):")
                for point in self.services.mood.get_mood_timeline(user_id, timeline_days):
                    label = f"  [{point.trigger_label}]" if point.trigger_label else ""
                    print(f"  {point.day}: {json.dumps(point.mood.to_dict())}{label}")
    def recommend(self, user_id: str, mode: str, limit: int, include_watched: bool,
                  vibe: Optional[str] = None, vibe_strength: Optional[float] = None) -> None:
        with self.logger.operation_context("MoodShiftApp", "recommend", user_id=user_id, mode=mode) as log:
            if vibe:
                self.services.vibes.set_vibe(user_id, vibe, strength=vibe_strength)
                log.info("Vibe applied for this run", template=vibe)
            response = self.services.recommendations.get_recommendations(
                user_id,
                mode=mode,
                limit=limit,
                include_watched=include_watched
            )
            self._print_header(f"{mode.upper()} RECOMMENDATIONS FOR {user_id}")
            if response.target_mood is not None:
                print("Target mood:")
                self._print_vector(response.target_mood)
            if not response.items:
                print("\nNo recommendations found. Is the catalog loaded?")
                return
            print(f"\nProcessing time: {response.processing_time_ms:.1f}ms\n")
            for i, item in enumerate(response.items, 1):
                print(f"{i:2d}. {item.title or item.media_id} ({item.media_kind} {item.media_id})")
                print(f"     Similarity: {item.similarity:.3f}")
    def match(self, user_a: str, user_b: str) -> None:
        with self.logger.operation_context("MoodShiftApp", "match", user_a=user_a, user_b=user_b):
            self.services.mood.compute_or_get_mood(user_a)
            self.services.mood.compute_or_get_mood(user_b)
            result = self.services.compatibility.get_compatibility(user_a, user_b)
            self._print_header(f"{user_a} x {user_b}")
            print(f"Similarity: {result.similarity}% ({result.verdict})\n")
            for d in result.dimensions:
                print(f"  {d.dimension:<12} {d.value_a:>3} vs {d.value_b:>3}  (diff {d.difference})")
            print(f"\nShared strengths: {', '.join(result.shared_strengths) or '-'}")
            print(f"Only {user_a}: {', '.join(result.unique_strengths['a']) or '-'}")
            print(f"Only {user_b}: {', '.join(result.unique_strengths['b']) or '-'}")
    def preview_vibe(self, user_id: Optional[str], template: Optional[str],
                     strength: Optional[float], hours: Optional[float]) -> None:
        if not template:
            self._print_header("VIBE TEMPLATES")
            for name in sorted(VIBE_TEMPLATES):
                print(f"  {name:<12} {json.dumps(VIBE_TEMPLATES[name].to_dict())}")
            return
        if not user_id:
            raise ValueError("--user is required when previewing a vibe")
        historical = self.services.mood.compute_or_get_mood(user_id)
        override = self.services.vibes.set_vibe(user_id, template, strength=strength, duration_hours=hours)
        effective = self.services.vibes.effective_mood(user_id, historical)
        self._print_header(f"VIBE '{override.template_name}' FOR {user_id}")
        print(f"Strength: {override.strength:.2f}, expires at {override.expires_at.isoformat()}\n")
        print("Historical:")
        self._print_vector(historical)
        print("Effective:")
        self._print_vector(effective.mood)
    def list_rules(self, validate_path: Optional[str] = None) -> None:
        if validate_path:
            with open(validate_path, 'r', encoding='utf-8') as f:
                records = json.load(f)
            result = DataValidator().validate_shift_rules(records)
            self._print_header(f"VALIDATION OF {validate_path}")
            for error in result.errors:
                print(f"  ERROR   {error}")
            for warning in result.warnings:
                print(f"  WARNING {warning}")
            print("Valid." if result.is_valid else "Invalid.")
            if not result.is_valid:
                sys.exit(1)
            return
        self._print_header("SHIFT RULES")
        for rule in self.services.rules.all_rules():
            flag = "" if rule.is_active else " (inactive)"
            conditions = ", ".join(
                f"{dim}{'>=' + str(c.min) if c.min is not None else ''}{' <=' + str(c.max) if c.max is not None else ''}"
                for dim, c in rule.conditions.items()
            )
            print(f"  [{rule.priority:>2}] {rule.name}{flag}")
            print(f"       when {conditions or 'always'} -> {json.dumps(rule.target_effects)}")
    def shutdown(self) -> None:
        if self.services is not None:
            self.services.shutdown()
    def _print_header(self, title: str) -> None:
        print("\n" + "="*60)
        print(title)
        print("="*60)
    def _print_vector(self, mood: MoodVector) -> None:
        for dim in MOOD_DIMENSIONS:
            value = getattr(mood, dim)
            print(f"  {dim:<12} {value:>3} {'#' * (value // 5)}")
def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MoodShift - mood-vector movie and TV recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    mood_parser = subparsers.add_parser("mood", help="Compute and show a user's mood")
    mood_parser.add_argument("--user", required=True, help="User id")
    mood_parser.add_argument(
        "--timeline",
        type=int,
        help="Also show the daily timeline for this many days"
    )
    recommend_parser = subparsers.add_parser("recommend", help="Generate recommendations")
    recommend_parser.add_argument("--user", required=True, help="User id")
    recommend_parser.add_argument(
        "--mode",
        choices=["match", "shift"],
        default="match",
        help="Match the current mood or shift away from it"
    )
    recommend_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of recommendations to return"
    )
    recommend_parser.add_argument(
        "--include-watched",
        action="store_true",
        help="Keep titles the user already watched"
    )
    recommend_parser.add_argument(
        "--vibe",
        help="Blend a vibe template over the mood for this run"
    )
    recommend_parser.add_argument(
        "--vibe-strength",
        type=float,
        help="Vibe blend strength (0.0-1.0)"
    )
    match_parser = subparsers.add_parser("match", help="Compare two users' moods")
    match_parser.add_argument("--user", required=True, help="First user id")
    match_parser.add_argument("--other", required=True, help="Second user id")
    vibe_parser = subparsers.add_parser("vibe", help="List vibe templates or preview one")
    vibe_parser.add_argument("--user", help="User id")
    vibe_parser.add_argument("--template", help="Template name")
    vibe_parser.add_argument("--strength", type=float, help="Blend strength (0.0-1.0)")
    vibe_parser.add_argument("--hours", type=float, help="Vibe duration in hours")
    rules_parser = subparsers.add_parser("rules", help="List shift rules or validate a rules file")
    rules_parser.add_argument("--validate", help="Path to a JSON rules file to validate")
    return parser
def main():
    parser = create_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)
    app = MoodShiftApp(args.config)
    app.initialize()
    try:
        if args.command == "mood":
            app.show_mood(args.user, args.timeline)
        elif args.command == "recommend":
            app.recommend(
                args.user,
                mode=args.mode,
                limit=args.limit,
                include_watched=args.include_watched,
                vibe=args.vibe,
                vibe_strength=args.vibe_strength
            )
        elif args.command == "match":
            app.match(args.user, args.other)
        elif args.command == "vibe":
            app.preview_vibe(args.user, args.template, args.strength, args.hours)
        elif args.command == "rules":
            app.list_rules(args.validate)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except (MoodShiftError, OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        app.shutdown()
if __name__ == "__main__":
    main()
