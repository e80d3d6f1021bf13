import csv
from typing import Dict, List, Optional, Tuple

from autoagl.models import ChuteState, Situation
from .bodies import BODIES
from .scenarios import Flight

# CSV columns:
# name,body,lat_deg,lon_deg,altitude_m,horizontal_mps,vertical_mps,situation,hover,chutes
# altitude_m / situation may be blank; chutes is "deploy_alt:STATE;..."
# Example:
# hop,Kerbin,0,1.5,3000,50,-20,,0,1000:ARMED;400:STOWED

FIELDNAMES = [
    "name", "body", "lat_deg", "lon_deg", "altitude_m",
    "horizontal_mps", "vertical_mps", "situation", "hover", "chutes",
]


def _bool_from_int_str(value: Optional[str], default: bool = False) -> bool:
    """Helper to parse '0'/'1' (or missing) into bool."""
    if value is None:
        return default
    value = value.strip()
    if value == "":
        return default
    try:
        return bool(int(value))
    except ValueError:
        # fallback: accept 'true'/'false'
        return value.lower() in ("1", "true", "yes", "y")


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


def parse_chutes(text: Optional[str]) -> List[Tuple[float, ChuteState]]:
    chutes: List[Tuple[float, ChuteState]] = []
    if not text:
        return chutes
    for item in text.split(";"):
        item = item.strip()
        if not item:
            continue
        alt, _, state = item.partition(":")
        try:
            chutes.append((float(alt), ChuteState[(state or "STOWED").strip().upper()]))
        except (KeyError, ValueError):
            raise RuntimeError(f"Bad parachute entry {item!r}; expected 'deploy_alt:STATE'")
    return chutes


def format_chutes(chutes: List[Tuple[float, ChuteState]]) -> str:
    return ";".join(f"{alt:g}:{state.name}" for alt, state in chutes)


def load_flights_csv(path: str) -> Dict[str, Flight]:
    """Load flight scenarios from CSV, keyed by name."""
    flights: Dict[str, Flight] = {}
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                name = row["name"]
                body_name = row["body"]
                lon_text = row["lon_deg"]
            except KeyError as e:
                raise RuntimeError(f"Missing expected column in CSV: {e}")

            try:
                lon = float(lon_text)
                lat = float(row.get("lat_deg") or 0.0)
                altitude = _optional_float(row.get("altitude_m"))
                horizontal = float(row.get("horizontal_mps") or 0.0)
                vertical = float(row.get("vertical_mps") or 0.0)
            except (TypeError, ValueError) as e:
                raise RuntimeError(f"Bad number for {name} in {path}: {e}")

            body = BODIES.get(body_name)
            if body is None:
                raise RuntimeError(f"Unknown body {body_name!r} in {path}; known: {sorted(BODIES)}")

            situation_text = (row.get("situation") or "").strip()
            try:
                situation = Situation[situation_text.upper()] if situation_text else None
            except KeyError:
                raise RuntimeError(f"Unknown situation {situation_text!r} for {name}")

            flights[name] = Flight(
                name=name,
                body=body,
                lon_deg=lon,
                lat_deg=lat,
                altitude_m=altitude,
                horizontal_mps=horizontal,
                vertical_mps=vertical,
                situation=situation,
                hover=_bool_from_int_str(row.get("hover"), default=False),
                chutes=parse_chutes(row.get("chutes")),
            )

    if not flights:
        raise RuntimeError(f"No flights in file: {path}")
    return flights


def save_flights_csv(path: str, flights: Dict[str, Flight]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=FIELDNAMES)
        w.writeheader()
        for name, fl in flights.items():
            w.writerow({
                "name": name,
                "body": fl.body.name,
                "lat_deg": fl.lat_deg,
                "lon_deg": fl.lon_deg,
                "altitude_m": "" if fl.altitude_m is None else fl.altitude_m,
                "horizontal_mps": fl.horizontal_mps,
                "vertical_mps": fl.vertical_mps,
                "situation": fl.situation.name if fl.situation is not None else "",
                "hover": 1 if fl.hover else 0,
                "chutes": format_chutes(fl.chutes),
            })
