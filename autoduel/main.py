"""Local console driver: feeds typed statuses to the orchestrator."""

import logging
import sys
from typing import Any, Iterable, Optional, TextIO

from autoduel.config import DEFAULT_CATALOG_PATH, DEFAULT_LOG_LEVEL, DEFAULT_RNG_SEED
from autoduel.engine.battle_manager import BattleManager
from autoduel.engine.deadline import RoundDeadline
from autoduel.engine.dice import DiceRoller
from autoduel.integration.catalog import CharacterCatalog
from autoduel.integration.orchestrator import BattleOrchestrator

logger = logging.getLogger(__name__.split(".")[-1])


def build_orchestrator(
    catalog_path: Optional[str] = DEFAULT_CATALOG_PATH, seed: Optional[int] = DEFAULT_RNG_SEED
) -> BattleOrchestrator:
    """Wire catalog, dice, deadline and manager from configuration."""
    catalog = CharacterCatalog.from_json(catalog_path) if catalog_path else CharacterCatalog()
    manager = BattleManager(dice=DiceRoller(seed=seed), deadline=RoundDeadline.from_config())
    return BattleOrchestrator(manager, catalog)


def line_to_status(line: str) -> Optional[dict[str, Any]]:
    """
    Build a status dict from ``<actor> <text...>``.

    Tokens in the text starting with '@' become mentions.
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return None
    actor = parts[0]
    text = parts[1] if len(parts) > 1 else ""
    mentions = [{"acct": token} for token in text.split() if token.startswith("@")]
    return {"account": {"acct": actor}, "content": text, "mentions": mentions}


def run_console(orchestrator: BattleOrchestrator, lines: Iterable[str], out: TextIO = sys.stdout) -> None:
    """Process each input line and write replies."""
    for line in lines:
        for result in orchestrator.manager.expire_overdue():
            out.write(orchestrator.formatter.format_result(result) + "\n\n")

        status = line_to_status(line)
        if status is None:
            continue
        reply = orchestrator.handle_incoming_status(status)
        if reply:
            out.write(f"@{status['account']['acct']} {reply}\n\n")
        out.flush()


def main() -> None:
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format="[%(name)-19s - %(levelname)5s] %(message)s")
    orchestrator = build_orchestrator()
    logger.info("Console ready: type '<acct> <command>' lines, Ctrl-D to quit")
    run_console(orchestrator, sys.stdin)


if __name__ == "__main__":
    main()
