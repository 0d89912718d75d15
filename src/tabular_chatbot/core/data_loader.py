from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

from tabular_chatbot.config import CLIENTS_CSV_PATH
from tabular_chatbot.core.schema import (
    Dataset,
    Field,
    FieldKind,
    FilterMode,
    Schema,
    is_iso_date,
)

logger = logging.getLogger(__name__)


class DataLoaderError(Exception):
    """Raised when the client seed file cannot be read."""


class SeedDataError(Exception):
    """
    Raised when seed data does not parse into its schema.

    Always a build-time defect: callers must let it propagate rather than
    turn it into a chat message.
    """


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

TIP_SCHEMA = Schema(
    [
        Field("id", FieldKind.NUMBER),
        Field("tip", FieldKind.TEXT),
        Field("category", FieldKind.TEXT, filter_mode=FilterMode.EXACT),
    ]
)

EXERCISE_SCHEMA = Schema(
    [
        Field("id", FieldKind.NUMBER),
        Field("exercise", FieldKind.TEXT),
        Field("muscleGroup", FieldKind.TEXT, filter_mode=FilterMode.CONTAINS, delimiter=","),
    ]
)

CLIENT_SCHEMA = Schema(
    [
        Field("name", FieldKind.TEXT),
        Field("service", FieldKind.TEXT, filter_mode=FilterMode.EXACT),
        Field("price", FieldKind.NUMBER, display="currency"),
        Field("date", FieldKind.DATE),
    ]
)

# ---------------------------------------------------------------------------
# Literal seed rows
# ---------------------------------------------------------------------------

HAIR_TIPS: List[Dict[str, Any]] = [
    {"id": 1, "tip": "Use a heat protectant spray before styling with hot tools", "category": "Protection"},
    {"id": 2, "tip": "Deep condition your hair once a week", "category": "Maintenance"},
    {"id": 3, "tip": "Trim your hair every 6-8 weeks to prevent split ends", "category": "Maintenance"},
    {"id": 4, "tip": "Avoid washing your hair every day to maintain natural oils", "category": "Cleansing"},
    {"id": 5, "tip": "Use a wide-tooth comb to detangle wet hair", "category": "Styling"},
    {"id": 6, "tip": "Apply hair masks regularly for extra nourishment", "category": "Treatment"},
    {"id": 7, "tip": "Protect your hair while sleeping with a silk or satin pillowcase", "category": "Protection"},
    {"id": 8, "tip": "Avoid tight hairstyles that can cause breakage", "category": "Styling"},
    {"id": 9, "tip": "Use cool water for the final rinse to seal the hair cuticle", "category": "Cleansing"},
    {"id": 10, "tip": "Massage your scalp regularly to stimulate blood flow", "category": "Maintenance"},
]

NUTRITION_TIPS: List[Dict[str, Any]] = [
    {"id": 1, "tip": "Eat a variety of colorful fruits and vegetables daily", "category": "General"},
    {"id": 2, "tip": "Choose whole grains over refined grains", "category": "Carbohydrates"},
    {"id": 3, "tip": "Include lean proteins in every meal", "category": "Protein"},
    {"id": 4, "tip": "Stay hydrated by drinking water throughout the day", "category": "Hydration"},
    {"id": 5, "tip": "Limit processed foods and added sugars", "category": "General"},
    {"id": 6, "tip": "Include healthy fats like avocados and nuts in your diet", "category": "Fats"},
    {"id": 7, "tip": "Practice portion control to maintain a healthy weight", "category": "Weight Management"},
    {"id": 8, "tip": "Eat fermented foods for gut health", "category": "Digestive Health"},
    {"id": 9, "tip": "Choose low-fat dairy or dairy alternatives fortified with calcium", "category": "Calcium"},
    {"id": 10, "tip": "Include omega-3 rich foods like fatty fish in your diet", "category": "Fats"},
]

LEG_EXERCISES: List[Dict[str, Any]] = [
    {"id": 1, "exercise": "Squats", "muscleGroup": "Quadriceps, Hamstrings, Glutes"},
    {"id": 2, "exercise": "Lunges", "muscleGroup": "Quadriceps, Hamstrings, Glutes"},
    {"id": 3, "exercise": "Deadlifts", "muscleGroup": "Hamstrings, Glutes, Lower Back"},
    {"id": 4, "exercise": "Leg Press", "muscleGroup": "Quadriceps, Hamstrings, Glutes"},
    {"id": 5, "exercise": "Calf Raises", "muscleGroup": "Calves"},
    {"id": 6, "exercise": "Leg Extensions", "muscleGroup": "Quadriceps"},
    {"id": 7, "exercise": "Hamstring Curls", "muscleGroup": "Hamstrings"},
    {"id": 8, "exercise": "Step-Ups", "muscleGroup": "Quadriceps, Hamstrings, Glutes"},
    {"id": 9, "exercise": "Bulgarian Split Squats", "muscleGroup": "Quadriceps, Hamstrings, Glutes"},
    {"id": 10, "exercise": "Glute Bridges", "muscleGroup": "Glutes, Hamstrings"},
]

# lastName,firstName,service,price,date
CLIENTS_CSV = """\
Collier,Amber,mullet,$25.00,2023-12-04
Colon,Devyn,fdclipper,$0.00,2023-12-04
Haske,Toddy,shrtcut,$69.00,2023-12-04
Johnson,Leah,lngcrlcut,$107.00,2023-12-04
Johnson,Leah,cut4,$88.00,2023-12-04
Anderson,Kara,lngcrlcut,$107.00,2024-05-24
"""

CLIENT_CSV_COLUMNS = ("lastName", "firstName", "service", "price", "date")


# ---------------------------------------------------------------------------
# Client CSV parsing
# ---------------------------------------------------------------------------

def parse_price(text: str) -> float:
    """
    Parse a currency string such as "$25.00" or "$1,250.50" into a number.

    Raises SeedDataError for anything that is not a plain decimal once the
    currency symbol and thousands separators are removed.
    """
    cleaned = str(text).strip().replace("$", "").replace(",", "").strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise SeedDataError(f"Non-numeric price: {text!r}") from None
    if not amount.is_finite():
        raise SeedDataError(f"Non-numeric price: {text!r}")
    return float(amount)


def parse_client_line(line: str, line_no: int = 1) -> Dict[str, Any]:
    parts = [p.strip() for p in line.split(",")]
    # "$1,250.00" splits on its thousands separator; rejoin anything between service and date
    if len(parts) > len(CLIENT_CSV_COLUMNS) and parts[3].startswith("$"):
        parts = parts[:3] + ["".join(parts[3:-1])] + parts[-1:]
    if len(parts) != len(CLIENT_CSV_COLUMNS):
        raise SeedDataError(
            f"Line {line_no}: expected {len(CLIENT_CSV_COLUMNS)} fields "
            f"({','.join(CLIENT_CSV_COLUMNS)}), got {len(parts)}: {line!r}"
        )

    last_name, first_name, service, price, day = parts
    try:
        amount = parse_price(price)
    except SeedDataError as exc:
        raise SeedDataError(f"Line {line_no}: {exc}") from exc
    if not is_iso_date(day):
        raise SeedDataError(f"Line {line_no}: date must be YYYY-MM-DD, got {day!r}")

    return {
        "name": f"{first_name} {last_name}",
        "service": service,
        "price": amount,
        "date": day,
    }


def parse_clients_csv(csv_text: str) -> List[Dict[str, Any]]:
    """
    Parse the client CSV block (no header) into client rows.

    Blank lines are skipped. Any malformed line raises SeedDataError; the
    parser does not try to recover.
    """
    rows: List[Dict[str, Any]] = []
    for line_no, line in enumerate(csv_text.strip().splitlines(), start=1):
        if not line.strip():
            continue
        rows.append(parse_client_line(line, line_no=line_no))
    return rows


# ---------------------------------------------------------------------------
# Client seed source
# ---------------------------------------------------------------------------

def read_csv_file(path: str | Path) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataLoaderError(f"Could not read client CSV file {p}: {exc}") from exc


def load_clients_csv_text(path: str = CLIENTS_CSV_PATH) -> str:
    """
    Return the client seed CSV text.

    A configured local file replaces the built-in CLIENTS_CSV block. It is
    read once, when the client dataset is built at startup.
    """
    if path:
        logger.info("Loading client CSV from file: %s", path)
        return read_csv_file(path)
    return CLIENTS_CSV


# ---------------------------------------------------------------------------
# Dataset builders
# ---------------------------------------------------------------------------

def build_hair_tips() -> Dataset:
    return Dataset("hair tips", TIP_SCHEMA, HAIR_TIPS, title="Hairstyling tips")


def build_nutrition_tips() -> Dataset:
    return Dataset("nutrition tips", TIP_SCHEMA, NUTRITION_TIPS, title="Nutrition tips")


def build_leg_exercises() -> Dataset:
    return Dataset("leg exercises", EXERCISE_SCHEMA, LEG_EXERCISES, title="Leg exercises")


def build_clients(csv_text: Optional[str] = None) -> Dataset:
    text = load_clients_csv_text() if csv_text is None else csv_text
    rows = parse_clients_csv(text)
    logger.info("Parsed %d client rows", len(rows))
    return Dataset(
        "show clients",
        CLIENT_SCHEMA,
        rows,
        title="Salon clients",
        reply="Here's the client table:",
    )
