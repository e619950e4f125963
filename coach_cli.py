"""
Command line wrapper around the `sleepcoach` package.

Usage:
  python coach_cli.py <path_to_json_file>
  python coach_cli.py < observation.json
  echo '{"sleeping_score": 3, "con_score": 4, "sleeping_time": 7.5}' | python coach_cli.py

An object is one observation; an array (or {"history": [...]}) is a history,
oldest first.
"""
from __future__ import annotations
import json
import logging
import sys
from typing import List, Optional
from sleepcoach import InvalidObservation, Settings, analyze_data, analyze_from_file, default_coach

logger = logging.getLogger("coach_cli")


def _fail(error: str, **extra) -> int:
    print(json.dumps({"error": error, **extra}, ensure_ascii=False), file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Processes data from a file or stdin"""
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = Settings.from_env()
    except ValueError as e:
        return _fail("invalid_config", message=str(e))
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                        stream=sys.stderr)
    coach = default_coach(settings)

    try:
        # Option 1: a file passed as an argument
        if argv:
            res = analyze_from_file(argv[0], coach)
        # Option 2: data piped into stdin
        elif not sys.stdin.isatty():
            res = analyze_data(json.load(sys.stdin), coach)
        else:
            print(__doc__, file=sys.stderr)
            return 1
    except json.JSONDecodeError as e:
        return _fail("invalid_json", message=str(e))
    except InvalidObservation as e:
        return _fail("invalid_payload", details=[{"field": x["field"], "reason": x["reason"]} for x in e.errors])
    except (OSError, ValueError) as e:
        logger.error("Could not process input: %s", e)
        return _fail("processing_error", message=str(e))

    print(json.dumps(res, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
