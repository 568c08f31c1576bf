"""
Pandemic board - the 48 cities, their disease colors, and connections.

This is static data: 4 colors, 12 cities per color. The engine uses it to
build the infection and city-card decks and to walk outbreak adjacency.
"""

from __future__ import annotations
from dataclasses import dataclass

from ...engine_core.cards import Disease


START_CITY = "Atlanta"


@dataclass(frozen=True)
class City:
    """A city on the board."""
    name: str
    color: Disease
    connections: tuple[str, ...]


CITIES: tuple[City, ...] = (
    # Blue: North America & Europe
    City("Atlanta", Disease.BLUE, ("Chicago", "Miami", "Washington")),
    City("Chicago", Disease.BLUE, ("Atlanta", "Los Angeles", "Mexico City", "Montreal", "San Francisco")),
    City("Essen", Disease.BLUE, ("London", "Milan", "Paris", "St. Petersburg")),
    City("London", Disease.BLUE, ("Essen", "Madrid", "New York", "Paris")),
    City("Madrid", Disease.BLUE, ("Algiers", "London", "New York", "Paris", "Sao Paulo")),
    City("Milan", Disease.BLUE, ("Essen", "Istanbul", "Paris")),
    City("Montreal", Disease.BLUE, ("Chicago", "New York", "Washington")),
    City("New York", Disease.BLUE, ("London", "Madrid", "Montreal", "Washington")),
    City("Paris", Disease.BLUE, ("Algiers", "Essen", "London", "Madrid", "Milan")),
    City("San Francisco", Disease.BLUE, ("Chicago", "Los Angeles", "Manila", "Tokyo")),
    City("St. Petersburg", Disease.BLUE, ("Essen", "Istanbul", "Moscow")),
    City("Washington", Disease.BLUE, ("Atlanta", "Miami", "Montreal", "New York")),

    # Yellow: Central/South America & Africa
    City("Bogota", Disease.YELLOW, ("Buenos Aires", "Lima", "Mexico City", "Miami", "Sao Paulo")),
    City("Buenos Aires", Disease.YELLOW, ("Bogota", "Sao Paulo")),
    City("Johannesburg", Disease.YELLOW, ("Khartoum", "Kinshasa")),
    City("Khartoum", Disease.YELLOW, ("Cairo", "Johannesburg", "Kinshasa", "Lagos")),
    City("Kinshasa", Disease.YELLOW, ("Johannesburg", "Khartoum", "Lagos")),
    City("Lagos", Disease.YELLOW, ("Khartoum", "Kinshasa", "Sao Paulo")),
    City("Lima", Disease.YELLOW, ("Bogota", "Mexico City", "Santiago")),
    City("Los Angeles", Disease.YELLOW, ("Chicago", "Mexico City", "San Francisco", "Sydney")),
    City("Mexico City", Disease.YELLOW, ("Bogota", "Chicago", "Lima", "Los Angeles", "Miami")),
    City("Miami", Disease.YELLOW, ("Atlanta", "Bogota", "Mexico City", "Washington")),
    City("Santiago", Disease.YELLOW, ("Lima",)),
    City("Sao Paulo", Disease.YELLOW, ("Bogota", "Buenos Aires", "Lagos", "Madrid")),

    # Black: Middle East, Central & South Asia
    City("Algiers", Disease.BLACK, ("Cairo", "Istanbul", "Madrid", "Paris")),
    City("Baghdad", Disease.BLACK, ("Cairo", "Istanbul", "Karachi", "Riyadh", "Tehran")),
    City("Cairo", Disease.BLACK, ("Algiers", "Baghdad", "Istanbul", "Khartoum", "Riyadh")),
    City("Chennai", Disease.BLACK, ("Bangkok", "Delhi", "Jakarta", "Kolkata", "Mumbai")),
    City("Delhi", Disease.BLACK, ("Chennai", "Karachi", "Kolkata", "Mumbai", "Tehran")),
    City("Istanbul", Disease.BLACK, ("Algiers", "Baghdad", "Cairo", "Milan", "Moscow", "St. Petersburg")),
    City("Karachi", Disease.BLACK, ("Baghdad", "Delhi", "Mumbai", "Riyadh", "Tehran")),
    City("Kolkata", Disease.BLACK, ("Bangkok", "Chennai", "Delhi", "Hong Kong")),
    City("Moscow", Disease.BLACK, ("Istanbul", "St. Petersburg", "Tehran")),
    City("Mumbai", Disease.BLACK, ("Chennai", "Delhi", "Karachi")),
    City("Riyadh", Disease.BLACK, ("Baghdad", "Cairo", "Karachi")),
    City("Tehran", Disease.BLACK, ("Baghdad", "Delhi", "Karachi", "Moscow")),

    # Red: East Asia, Southeast Asia & Oceania
    City("Bangkok", Disease.RED, ("Chennai", "Ho Chi Minh City", "Hong Kong", "Jakarta", "Kolkata")),
    City("Beijing", Disease.RED, ("Seoul", "Shanghai")),
    City("Ho Chi Minh City", Disease.RED, ("Bangkok", "Hong Kong", "Jakarta", "Manila")),
    City("Hong Kong", Disease.RED, ("Bangkok", "Ho Chi Minh City", "Kolkata", "Manila", "Shanghai", "Taipei")),
    City("Jakarta", Disease.RED, ("Bangkok", "Chennai", "Ho Chi Minh City", "Sydney")),
    City("Manila", Disease.RED, ("Ho Chi Minh City", "Hong Kong", "San Francisco", "Sydney", "Taipei")),
    City("Osaka", Disease.RED, ("Taipei", "Tokyo")),
    City("Seoul", Disease.RED, ("Beijing", "Shanghai", "Tokyo")),
    City("Shanghai", Disease.RED, ("Beijing", "Hong Kong", "Seoul", "Taipei", "Tokyo")),
    City("Sydney", Disease.RED, ("Jakarta", "Los Angeles", "Manila")),
    City("Taipei", Disease.RED, ("Hong Kong", "Manila", "Osaka", "Shanghai")),
    City("Tokyo", Disease.RED, ("Osaka", "San Francisco", "Seoul", "Shanghai")),
)

CITY_MAP: dict[str, City] = {city.name: city for city in CITIES}


def get_city(name: str) -> City | None:
    """Look up a city by exact name."""
    return CITY_MAP.get(name)


def get_cities_by_color(color: Disease) -> list[City]:
    """All cities of one color, in board order."""
    return [city for city in CITIES if city.color == color]


def neighbors(name: str) -> tuple[str, ...]:
    """Connections of a city. Raises ValueError for unknown cities."""
    city = CITY_MAP.get(name)
    if city is None:
        raise ValueError(f"City not found: {name}")
    return city.connections
