"""
DAB code tables: extended country codes, language codes and programme types.

This module provides the lookups between human-readable names (as shown to an
operator) and the hexadecimal codes written into the multiplexer configuration.

Deutsch:
    Code-Tabellen für DAB: erweiterte Ländercodes (ECC), Sprachcodes und
    Programmtypen, sowie die Auflösung von Namen zu Hex-Codes.
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from .models import UNDEFINED_NAME

logger = logging.getLogger(__name__)

# Extended Country Codes (ETSI TS 101 756, European broadcasting area)
COUNTRIES: Dict[str, str] = {
    UNDEFINED_NAME: "00",
    "Albania": "E0",
    "Algeria": "E0",
    "Andorra": "E0",
    "Armenia": "E4",
    "Austria": "E0",
    "Azerbaijan": "E3",
    "Azores (Portugal)": "E0",
    "Belarus": "E3",
    "Belgium": "E0",
    "Bosnia Herzegovina": "E4",
    "Bulgaria": "E1",
    "Canaries (Spain)": "E0",
    "Croatia": "E3",
    "Cyprus": "E1",
    "Czech Republic": "E2",
    "Denmark": "E1",
    "Egypt": "E0",
    "Estonia": "E4",
    "Faroe (Denmark)": "E1",
    "Finland": "E1",
    "France": "E1",
    "Georgia": "E4",
    "Germany": "E0",
    "Gibraltar (UK)": "E1",
    "Greece": "E1",
    "Hungary": "E0",
    "Iceland": "E2",
    "Iraq": "E1",
    "Ireland": "E3",
    "Israel": "E0",
    "Italy": "E0",
    "Jordan": "E1",
    "Kazakhstan": "E3",
    "Kosovo": "E4",
    "Kyrgyzstan": "E4",
    "Latvia": "E3",
    "Lebanon": "E3",
    "Libya": "E1",
    "Liechtenstein": "E2",
    "Lithuania": "E2",
    "Luxembourg": "E1",
    "Macedonia": "E4",
    "Madeira": "E2",
    "Malta": "E0",
    "Moldova": "E4",
    "Monaco": "E2",
    "Montenegro": "E3",
    "Morocco": "E2",
    "Netherlands": "E3",
    "Norway": "E2",
    "Palestine": "E0",
    "Poland": "E2",
    "Portugal": "E4",
    "Romania": "E1",
    "Russian Federation": "E0",
    "San Marino": "E1",
    "Serbia": "E2",
    "Slovakia": "E2",
    "Slovenia": "E4",
    "Spain": "E2",
    "Sweden": "E3",
    "Switzerland": "E1",
    "Syria": "E2",
    "Tajikistan": "E3",
    "Tunisia": "E2",
    "Turkey": "E3",
    "Turkmenistan": "E4",
    "Ukraine": "E4",
    "United Kingdom": "E1",
    "Uzbekistan": "E4",
    "Vatican": "E2",
}

# Language codes (ETSI TS 101 756, table 9)
LANGUAGES: Dict[str, str] = {
    UNDEFINED_NAME: "00",
    "Albanian": "01",
    "Breton": "02",
    "Catalan": "03",
    "Croatian": "04",
    "Welsh": "05",
    "Czech": "06",
    "Danish": "07",
    "German": "08",
    "English": "09",
    "Spanish": "0A",
    "Esperanto": "0B",
    "Estonian": "0C",
    "Basque": "0D",
    "Faroese": "0E",
    "French": "0F",
    "Frisian": "10",
    "Irish": "11",
    "Gaelic": "12",
    "Galician": "13",
    "Icelandic": "14",
    "Italian": "15",
    "Lappish": "16",
    "Latin": "17",
    "Latvian": "18",
    "Luxembourgian": "19",
    "Lithuanian": "1A",
    "Hungarian": "1B",
    "Maltese": "1C",
    "Dutch": "1D",
    "Norwegian": "1E",
    "Occitan": "1F",
    "Polish": "20",
    "Portuguese": "21",
    "Romanian": "22",
    "Romansh": "23",
    "Serbian": "24",
    "Slovak": "25",
    "Slovene": "26",
    "Finnish": "27",
    "Swedish": "28",
    "Turkish": "29",
    "Flemish": "2A",
    "Walloon": "2B",
    "Vietnamese": "46",
    "Ukrainian": "49",
    "Russian": "56",
    "Korean": "65",
    "Japanese": "69",
    "Hindi": "6B",
    "Hebrew": "6C",
    "Greek": "70",
    "Chinese": "75",
    "Bulgarian": "77",
    "Arabic": "7E",
}

# Programme types (static PTY, international table 1)
PROGRAMME_TYPES: Dict[int, Tuple[str, str]] = {
    0: ("None", "No programme type"),
    1: ("News", "News"),
    2: ("Affairs", "Current Affairs"),
    3: ("Info", "Information"),
    4: ("Sport", "Sport"),
    5: ("Education", "Education"),
    6: ("Drama", "Drama"),
    7: ("Arts", "Culture"),
    8: ("Science", "Science"),
    9: ("Talk", "Varied"),
    10: ("Pop", "Pop Music"),
    11: ("Rock", "Rock Music"),
    12: ("Easy", "Easy Listening Music"),
    13: ("Classics", "Light Classical"),
    14: ("Classics", "Serious Classical"),
    15: ("Other_M", "Other Music"),
    16: ("Weather", "Weather/meteorology"),
    17: ("Finance", "Finance/Business"),
    18: ("Children", "Children's programmes"),
    19: ("Factual", "Social Affairs"),
    20: ("Religion", "Religion"),
    21: ("Phone_In", "Phone In"),
    22: ("Travel", "Travel"),
    23: ("Leisure", "Leisure"),
    24: ("Jazz", "Jazz Music"),
    25: ("Country", "Country Music"),
    26: ("Nation_M", "National Music"),
    27: ("Oldies", "Oldies Music"),
    28: ("Folk", "Folk Music"),
    29: ("Document", "Documentary"),
}


def ecc_code(country: str) -> str:
    """
    Resolve a country name to its extended country code.

    Args:
        country: Name from COUNTRIES, or a literal 2-digit hex code

    Returns:
        Hex code without prefix. Names missing from the table are returned
        unchanged (the value is taken as a literal code), "" becomes "00".
    """
    return _resolve(COUNTRIES, country)


def language_code(language: str) -> str:
    """Resolve a language name to its code; same fallback rules as ecc_code."""
    return _resolve(LANGUAGES, language)


def programme_type_name(pty: int) -> str:
    entry = PROGRAMME_TYPES.get(pty)
    if entry is None:
        logger.debug("unknown programme type %s", pty)
        return str(pty)
    return entry[1]


def _resolve(table: Dict[str, str], name: str) -> str:
    code = table.get(name)
    if code is not None:
        return code
    return name or "00"
