"""Weather lookup MCP server with no known vulnerabilities."""

import json
import os
import sqlite3
import subprocess
from pathlib import Path

import requests
import yaml
from mcp.server.fastmcp import FastMCP

mcp = FastMCP("weather")

FORECAST_API = "https://api.weather.example/v1/forecast"
ARCHIVE_DIR = Path("/srv/weather/archive")
ALLOWED_CITIES = {"london", "paris", "tokyo"}


def load_config(path: Path) -> dict:
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def api_headers() -> dict:
    return {"Authorization": f"Bearer {os.environ['WEATHER_API_KEY']}"}


@mcp.tool()
def get_forecast(city: str) -> str:
    """Return the three-day forecast for a supported city."""
    if city not in ALLOWED_CITIES:
        raise ValueError(f"Unsupported city: {city}")
    resp = requests.get(FORECAST_API, params={"city": city}, headers=api_headers(), timeout=10)
    resp.raise_for_status()
    return json.dumps(resp.json(), indent=2)


@mcp.tool()
def past_readings(db_path: str, city: str, limit: int = 10) -> str:
    """Return the most recent stored readings for a city."""
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.execute(
            "SELECT day, high, low FROM readings WHERE city = ? ORDER BY day DESC LIMIT ?",
            (city, limit),
        )
        return json.dumps(cursor.fetchall())
    finally:
        conn.close()


@mcp.tool()
def read_archive(name: str) -> str:
    """Read one archived report by file name."""
    path = (ARCHIVE_DIR / name).resolve()
    if not path.is_relative_to(ARCHIVE_DIR):
        raise ValueError("Report is outside the archive")
    return path.read_text(encoding="utf-8")


@mcp.tool()
def compress_archive(name: str) -> str:
    """Compress an archived report in place."""
    path = (ARCHIVE_DIR / name).resolve()
    if not path.is_relative_to(ARCHIVE_DIR):
        raise ValueError("Report is outside the archive")
    subprocess.run(["gzip", "--keep", str(path)], check=True, capture_output=True)
    return f"{path.name}.gz"
