from __future__ import annotations

"""Static vocabulary tables shared by query normalisation and ranking.

Everything here is read-only process-wide data: the tables are built once
at import and exposed as ``frozenset`` / ``MappingProxyType`` so no caller
can mutate them.  Retrieval and ranking must read the same tables, which is
why they live in one module instead of being inlined where they are used.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

# ---------------------------------------------------------------------------
# Size / pack / multiplier tokens stripped by normalize_text
# ---------------------------------------------------------------------------

UNIT_TOKENS = frozenset(
    {"g", "kg", "ml", "l", "oz", "lb", "litre", "liter", "gal", "gallon"}
)

PACK_TOKENS = frozenset({"pack", "pcs", "piece", "pieces", "pk", "ct", "count"})

# Marker letter for multipliers such as "x2" and "3x".
MULTIPLIER_MARKER = "x"

STOP_WORDS = frozenset({"and", "or", "the", "of", "with"})

# ---------------------------------------------------------------------------
# Local (Jamaican) spellings
# ---------------------------------------------------------------------------

# misspelling -> canonical form, applied as whole-word replacements
TERM_CORRECTIONS: Mapping[str, str] = MappingProxyType(
    {
        "raice": "rice",
        "ryce": "rice",
        "flawa": "flour",
        "solt": "salt",
        "shuga": "sugar",
        "oyle": "oil",
        "melk": "milk",
        "butta": "butter",
        "bred": "bread",
        "chiken": "chicken",
        "feesh": "fish",
        "corn beef": "corned beef",
        "cornedbeef": "corned beef",
        "cornbeef": "corned beef",
        "sardeen": "sardine",
        "makrel": "mackerel",
        "graece": "grace",
        "lasko": "lasco",
        "jamacia": "jamaica",
        "akkee": "ackee",
        "calaloo": "callaloo",
        "plantin": "plantain",
        "bananna": "banana",
        "cokonut": "coconut",
        "sorrell": "sorrel",
        "gingerbeer": "ginger beer",
        "pattys": "patties",
        "peppa": "pepper",
        "scotchbonnet": "scotch bonnet",
    }
)

# canonical term -> known alternate spellings / local names
TERM_SYNONYMS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        # staples
        "rice": ("raice", "ryce", "riece"),
        "flour": ("flawa", "flowa"),
        "salt": ("solt", "sault"),
        "sugar": ("shuga", "shugar", "sugah"),
        "oil": ("oyle", "oile"),
        "milk": ("melk", "milke"),
        "butter": ("butta", "butah"),
        "cheese": ("cheeze", "cheez"),
        "bread": ("bred", "bredd", "breade"),
        "chicken": ("chiken", "chickn", "chikin"),
        "beef": ("beffe",),
        "fish": ("feesh", "fishe"),
        "corned beef": ("corn beef", "cornd beef", "cornedbeef", "cornbeef"),
        "sardine": ("sardeen", "sardines", "sardeens"),
        "mackerel": ("makrel", "makarel", "mackrel"),
        "tuna": ("tunah",),
        # brands
        "grace": ("graece", "gracce", "gracee"),
        "lasco": ("lasko", "lascko", "lazco"),
        "luscious": ("lusciuous", "lushious"),
        "jamaica": ("jamacia", "jamaca", "jamaika"),
        # local produce and dishes
        "ackee": ("akkee", "akie", "akki"),
        "callaloo": ("calaloo", "kalaloo", "kalalou", "callalou"),
        "plantain": ("plantin", "plantaine", "plantein"),
        "yam": ("yams",),
        "banana": ("bananna", "bananas"),
        "coconut": ("cokonut", "coconot", "kokonut"),
        "sorrel": ("sorrell", "sorell", "sorel"),
        "ginger beer": ("gingerbeer", "ginga beer", "ginger bier"),
        "jerk": ("jerc", "jerk chicken", "jerke"),
        "patties": ("pattys", "pattees", "patteys"),
        "bun": ("bun bread", "spiced bun", "easter bun"),
        "hard dough bread": ("harddough", "hard dough", "hardough"),
        # beverages
        "tropical rhythms": ("tropical rythms", "tropical rhytms"),
        "ting": ("ting drink", "ting grapefruit"),
        "desnoes and geddes": ("d&g", "d and g", "desnoes geddes"),
        "red stripe": ("redstripe", "red stripe beer"),
        # cooking ingredients
        "all purpose seasoning": ("allpurpose", "all purpose", "allpurpose seasoning"),
        "curry powder": ("curry", "currie", "curri"),
        "black pepper": ("peppa", "pepper", "black peppah"),
        "scotch bonnet": ("scotchbonnet", "scotch bonet", "scot bonnet"),
        "pimento": ("pimenta", "allspice", "all spice"),
    }
)

# Longest misspellings first so "corn beef" is rewritten before any shorter
# key could clip part of it.
CORRECTIONS_LONGEST_FIRST: Tuple[Tuple[str, str], ...] = tuple(
    sorted(TERM_CORRECTIONS.items(), key=lambda kv: (-len(kv[0]), kv[0]))
)
