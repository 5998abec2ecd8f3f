"""Демо-сценарии звонков из JSON-файла, по умолчанию встроенный data/scenarios.json."""
import json
import logging
from functools import lru_cache
from pathlib import Path

from call_insights.contracts.crm_schemas import Scenario

logger = logging.getLogger(__name__)

BUNDLED_SCENARIOS = Path(__file__).resolve().parent.parent / "data" / "scenarios.json"


def scenarios_file(configured: str = "") -> Path:
    return Path(configured) if configured else BUNDLED_SCENARIOS


@lru_cache(maxsize=8)
def load_scenarios(path: Path = BUNDLED_SCENARIOS) -> tuple[Scenario, ...]:
    """Прочитать и провалидировать сценарии. Файл читается один раз на путь."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    scenarios = tuple(Scenario.model_validate(item) for item in raw)
    logger.info("scenarios loaded path=%s count=%d", path, len(scenarios))
    return scenarios


def get_scenario(scenario_id: str, path: Path = BUNDLED_SCENARIOS) -> Scenario | None:
    for scenario in load_scenarios(path):
        if scenario.id == scenario_id:
            return scenario
    return None
