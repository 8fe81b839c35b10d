"""
Static lookup tables for business-name matching and query expansion.

Everything here is fixed domain knowledge loaded at import time and never
mutated: US states, common city/location words, legal suffixes, establishment
types and category keyword families.
"""

from typing import Dict, FrozenSet, Tuple

# =============================================================================
# NAME CLEANING
# =============================================================================

# Legal/type suffixes stripped as whole words before comparison
LEGAL_SUFFIXES: Tuple[str, ...] = (
    "restaurant",
    "cafe",
    "llc",
    "inc",
    "corp",
    "ltd",
    "co",
)

# Establishment types whose mismatch means two names are different businesses
ESTABLISHMENT_TYPES: FrozenSet[str] = frozenset({
    "restaurant",
    "cafe",
    "bistro",
    "grill",
    "grille",
    "bar",
    "pub",
    "diner",
    "pizzeria",
    "bakery",
})

# Type words treated as the same establishment
EQUIVALENT_TYPES: Tuple[FrozenSet[str], ...] = (
    frozenset({"grill", "grille"}),
)

# =============================================================================
# LOCATION TERMS
# =============================================================================

US_STATES: FrozenSet[str] = frozenset({
    "al", "alabama", "ak", "alaska", "az", "arizona", "ar", "arkansas",
    "ca", "california", "co", "colorado", "ct", "connecticut", "de", "delaware",
    "fl", "florida", "ga", "georgia", "hi", "hawaii", "id", "idaho",
    "il", "illinois", "in", "indiana", "ia", "iowa", "ks", "kansas",
    "ky", "kentucky", "la", "louisiana", "me", "maine", "md", "maryland",
    "ma", "massachusetts", "mi", "michigan", "mn", "minnesota", "ms", "mississippi",
    "mo", "missouri", "mt", "montana", "ne", "nebraska", "nv", "nevada",
    "nh", "new hampshire", "nj", "new jersey", "nm", "new mexico", "ny", "new york",
    "nc", "north carolina", "nd", "north dakota", "oh", "ohio", "ok", "oklahoma",
    "or", "oregon", "pa", "pennsylvania", "ri", "rhode island", "sc", "south carolina",
    "sd", "south dakota", "tn", "tennessee", "tx", "texas", "ut", "utah",
    "vt", "vermont", "va", "virginia", "wa", "washington", "wv", "west virginia",
    "wi", "wisconsin", "wy", "wyoming",
})

GENERIC_PLACE_WORDS: FrozenSet[str] = frozenset({
    "city", "town", "village", "downtown", "metro", "area", "region", "county",
})

# Mostly Texas metros and the Waco area
COMMON_CITIES: FrozenSet[str] = frozenset({
    "houston", "dallas", "austin", "san antonio", "fort worth", "el paso", "arlington",
    "corpus christi", "plano", "laredo", "lubbock", "garland", "irving", "amarillo",
    "grand prairie", "brownsville", "pasadena", "mesquite", "mckinney", "killeen",
    "frisco", "carrollton", "denton", "midland", "abilene", "beaumont", "round rock",
    "richardson", "odessa", "waco", "lewisville", "tyler", "college station", "pearland",
    "sugar land", "baytown", "conroe", "longview", "bryan", "pharr", "missouri city",
    "temple", "flower mound", "league city", "cedar park", "harlingen",
    "north richland hills", "victoria", "san marcos", "new braunfels", "georgetown",
    "sherman", "rowlett", "texarkana", "huntsville", "galveston", "cedar hill", "wylie",
    "desoto", "burleson", "mansfield", "allen", "the woodlands", "pflugerville",
    "big spring", "mission", "port arthur", "euless", "grapevine", "bedford", "hurst",
    "keller", "coppell", "duncanville", "haltom city", "farmers branch", "southlake",
    "lancaster", "lorena", "hewitt", "robinson", "woodway", "bellmead", "lacy lakeview",
    "beverly hills",
})

LOCATION_TERMS: FrozenSet[str] = US_STATES | GENERIC_PLACE_WORDS | COMMON_CITIES

# Longest multi-word location phrase, in words
MAX_LOCATION_PHRASE_WORDS = max(len(term.split()) for term in LOCATION_TERMS)

# =============================================================================
# CATEGORY FAMILIES
# =============================================================================

# Substrings in a search variant that mark it as a category search
CATEGORY_TRIGGERS: Dict[str, Tuple[str, ...]] = {
    "pest control": ("pest control", "exterminator"),
}

# Keywords a business name must contain to belong to a category
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "pest control": (
        "pest control",
        "pest management",
        "exterminator",
        "fumigation",
        "termite",
        "rodent control",
    ),
}

# Generic words ignored when comparing names within a category
CATEGORY_STOP_WORDS: FrozenSet[str] = frozenset({
    "pest", "control", "service", "services", "company", "llc", "inc", "corp", "ltd",
    "management", "solutions", "professional", "the", "and", "of", "for",
})

# (substrings in the business name, fallback search templates)
CATEGORY_SEARCH_TEMPLATES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        ("pest control", "exterminator"),
        ("pest control {location}", "pest control service {location}", "exterminator {location}"),
    ),
    (
        ("plumb",),
        ("plumber {location}", "plumbing service {location}"),
    ),
    (
        ("electric",),
        ("electrician {location}", "electrical service {location}"),
    ),
)

# =============================================================================
# GOOGLE PLACE TYPES
# =============================================================================

# Most specific first
PRIORITY_PLACE_TYPES: Tuple[str, ...] = (
    "restaurant", "food", "meal_takeaway", "meal_delivery", "cafe", "bar",
    "doctor", "dentist", "hospital", "pharmacy", "veterinary_care",
    "lawyer", "accounting", "real_estate_agency", "insurance_agency",
    "beauty_salon", "hair_care", "spa", "gym", "fitness_center",
    "plumber", "electrician", "locksmith", "moving_company", "contractor",
    "car_repair", "car_dealer", "gas_station",
    "store", "clothing_store", "electronics_store", "shopping_mall",
    "lodging", "tourist_attraction",
    "establishment",
)

GENERIC_PLACE_TYPES: FrozenSet[str] = frozenset({"point_of_interest", "establishment", "premise"})

# Place type -> plural search term for a "10-pack" text search
SEARCH_CATEGORY_BY_TYPE: Dict[str, str] = {
    "plumber": "plumbers",
    "electrician": "electricians",
    "contractor": "contractors",
    "roofing_contractor": "roofing contractors",
    "restaurant": "restaurants",
    "dentist": "dentists",
    "doctor": "doctors",
    "lawyer": "lawyers",
    "establishment": "businesses",
}

# (substrings in the business name, search term) for generic "establishment" listings
SEARCH_CATEGORY_BY_NAME: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("plumb",), "plumbers"),
    (("electric",), "electricians"),
    (("hvac", "heating", "cooling"), "hvac contractors"),
    (("roof",), "roofing contractors"),
    (("pest",), "pest control"),
    (("clean",), "cleaning services"),
    (("restaurant", "cafe"), "restaurants"),
)
