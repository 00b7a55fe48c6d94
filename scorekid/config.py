import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = Path(os.environ.get("SCOREKID_DATA_DIR", PROJECT_ROOT / "matches"))
MATCHES_FILE = MATCHES_DIR / "scorekid_matches.json"

SCHEMA_VERSION = 1

MY_TEAM = "my_team"
RIVAL_TEAM = "rival_team"
TEAMS = (MY_TEAM, RIVAL_TEAM)

TEAM_LABELS = {
    MY_TEAM: "Mi Equipo",
    RIVAL_TEAM: "Equipo Rival",
}

INITIAL_TIMEOUTS = 3
BONUS_FOULS = 5
OUTS_PER_HALF = 3
STOPPAGE_INCREMENTS = (60, 180, 300)

VOLLEYBALL = "Voleibol"
BASKETBALL = "Baloncesto"
BASEBALL = "Béisbol"
TENNIS = "Tenis"
SOCCER = "Fútbol"
SWIMMING = "Natación"
ATHLETICS = "Atletismo"
OTHER = "Otro"

MY_TEAM_COLOR = "#3B82F6"
RIVAL_TEAM_COLOR = "#EF4444"
