# stockmeta/ml/categories.py
"""
Adobe Stock 分類層：
- 21 個固定分類（1..21）與名稱對照。
- coerce_category：把模型回傳的任意值轉成合法分類碼（非整數 → fallback，超出範圍 → 夾到 1 或 21）。
- classify：用 title + keywords 組成的 haystack，依「有序」規則表做子字串比對，
  第一條命中的規則勝出；全部不中時退回模型給的分類。

比對規則：
  haystack 先轉小寫、只保留字母數字並以單一空白連接，前後各補一個空白。
  規則中的詞 term 以 (" " + term) in haystack 判斷，因此一定從詞首開始比對：
    "dog"   → 命中 dog / dogs / doghouse，但不會命中 hotdog
    "cat "  → 結尾帶空白代表整個字，只命中 cat，不會命中 category / cathedral
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

CATEGORY_MIN = 1
CATEGORY_MAX = 21
DEFAULT_FALLBACK = 11  # Landscape

CATEGORIES: Dict[int, str] = {
    1: "Animals",
    2: "Buildings and Architecture",
    3: "Business",
    4: "Drinks",
    5: "The Environment",
    6: "States of Mind",
    7: "Food",
    8: "Graphic Resources",
    9: "Hobbies and Leisure",
    10: "Industry",
    11: "Landscape",
    12: "Lifestyle",
    13: "People",
    14: "Plants and Flowers",
    15: "Culture and Religion",
    16: "Science",
    17: "Social Issues",
    18: "Sports",
    19: "Technology",
    20: "Transport",
    21: "Travel",
}

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_WORD_RE = re.compile(r"[^\W_]+")


def category_name(code: int) -> str:
    return CATEGORIES[code]


def clamp_category(value: int) -> int:
    return max(CATEGORY_MIN, min(CATEGORY_MAX, value))


def coerce_category(value: Any, fallback: int = DEFAULT_FALLBACK) -> int:
    """
    將任意值轉為 1..21 的分類碼：
      - int → 直接使用；有限 float → 取整數部分
      - str → 取開頭的整數（類似 parseInt："4 (Drinks)" → 4）
      - bool / None / 其他 → fallback
    最後一律夾到 [1, 21]。
    """
    parsed = None
    if isinstance(value, bool) or value is None:
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if math.isfinite(value):
            parsed = int(value)
    elif isinstance(value, str):
        m = _LEADING_INT_RE.match(value.strip())
        if m:
            parsed = int(m.group(0))

    if parsed is None:
        parsed = fallback
    return clamp_category(parsed)


# ===========================================
# 規則表
# ===========================================
@dataclass(frozen=True)
class CategoryRule:
    category: int
    triggers: Tuple[str, ...]
    exclusions: Tuple[str, ...] = ()

    def matches(self, haystack: str) -> bool:
        if not _contains_any(haystack, self.triggers):
            return False
        return not _contains_any(haystack, self.exclusions)


def _contains_any(haystack: str, terms: Iterable[str]) -> bool:
    return any((" " + term) in haystack for term in terms)


def build_haystack(title: str, keywords: Sequence[str]) -> str:
    parts = [title or ""]
    parts.extend(str(k) for k in keywords or [])
    words = _WORD_RE.findall(" ".join(parts).lower())
    return " " + " ".join(words) + " "


_LANDSCAPE_WIDE = (
    "landscape", "panorama", "panoramic", "scenery", "scenic", "vista",
    "mountain", "valley", "countryside", "aerial",
)

_TOURISM = (
    "travel", "tourism", "tourist", "landmark", "sightseeing", "vacation",
    "destination", "old town", "historic center",
)

# 順序即優先權：前面的規則會先搶走重疊的圖片
DEFAULT_RULES: List[CategoryRule] = [
    # 1 Animals
    CategoryRule(1, (
        "animal", "wildlife", "pet ", "pets ", "dog", "puppy", "puppies", "cat ", "cats ",
        "kitten", "feline", "canine", "bird", "horse ", "horses ", "pony", "donkey",
        "cow ", "cows ", "cattle", "calf ", "sheep", "lamb ", "goat", "pig ", "pigs ",
        "piglet", "hen ", "hens ", "rooster", "lion", "tiger", "elephant", "giraffe",
        "zebra", "bear ", "bears ", "wolf ", "wolves", "fox ", "foxes", "deer", "rabbit",
        "bunny", "squirrel", "hedgehog", "monkey", "gorilla", "panda", "koala", "kangaroo",
        "dolphin", "whale", "shark", "turtle", "tortoise", "frog", "lizard", "snake",
        "reptile", "mammal", "insect", "butterfly", "butterflies", "bee ", "bees ",
        "beetle", "spider", "owl", "eagle", "parrot", "penguin", "flamingo", "swan",
        "seagull", "pigeon", "hamster", "guinea pig", "camel ", "camels ", "llama", "alpaca", "otter",
        "jellyfish", "zoo ", "safari", "livestock",
    )),
    # 14 Plants and Flowers（廣角風景照不算）
    CategoryRule(14, (
        "flower", "floral", "blossom", "bloom", "rose ", "roses ", "tulip", "daisy",
        "daisies", "orchid", "sunflower", "lily ", "lilies", "lavender", "peony", "peonies",
        "houseplant", "plant ", "plants ", "succulent", "cactus", "cacti", "fern", "leaf ",
        "leaves", "foliage", "botanical", "botany", "petal", "bouquet", "moss ", "bonsai",
        "seedling", "sprout", "greenery",
    ), exclusions=_LANDSCAPE_WIDE + ("power plant", "industrial")),
    # 11 Landscape
    CategoryRule(11, (
        "landscape", "mountain", "sea ", "seascape", "seaside", "ocean", "beach", "coast ", "coastal", "coastline",
        "shore", "lake", "river", "waterfall", "forest", "woods ", "woodland", "sky ",
        "skies", "sunset", "sunrise", "horizon ", "valley", "hill ", "hills ", "hillside",
        "meadow", "desert", "canyon", "glacier", "nature ", "wilderness", "great outdoors",
        "island", "cliff", "volcano", "dune", "aerial", "countryside", "rural ",
        "national park", "scenery", "scenic", "panorama", "panoramic", "rainbow",
        "clouds ", "cloudy", "milky way", "starry", "trees ",
    )),
    # 21 Travel
    CategoryRule(21, (
        "travel", "tourism", "tourist", "landmark", "sightseeing", "vacation", "monument",
        "cruise", "backpacker", "passport", "suitcase", "luggage", "resort ",
        "paris ", "london", "rome ", "venice", "new york", "tokyo", "kyoto", "barcelona",
        "prague", "amsterdam", "istanbul", "dubai", "berlin", "vienna", "lisbon", "athens",
        "santorini", "bali ", "vilnius", "riga ", "tallinn", "singapore", "hong kong",
        "san francisco", "las vegas", "eiffel tower", "colosseum", "big ben",
        "statue of liberty", "taj mahal", "great wall", "acropolis", "sagrada familia",
        "machu picchu", "pyramid", "golden gate",
    )),
    # 2 Buildings and Architecture（旅遊地標交給 Travel）
    CategoryRule(2, (
        "architecture", "architectural", "building", "skyscraper", "facade", "tower ",
        "bridge ", "cathedral", "church ", "interior design", "real estate", "residential",
        "apartment building", "cityscape", "skyline", "urban ", "roof", "staircase",
        "column", "arch ", "arches", "dome ", "villa ", "castle", "palace", "mansion",
        "house exterior", "modern house",
    ), exclusions=_TOURISM + ("team building",)),
    # 13 People
    CategoryRule(13, (
        "portrait", "person ", "persons ", "people", "man ", "men ", "woman", "women", "girl", "boy ",
        "boys ", "child", "children", "kid ", "kids ", "baby", "toddler", "teenager",
        "teen ", "teens ", "family", "couple", "face ", "faces ", "senior", "elderly",
        "adult", "human ", "humans ", "businessman", "businesswoman", "friends", "crowd", "mother ", "mothers ",
        "father", "daughter", "son ", "grandmother", "grandfather", "selfie", "bride",
        "groom ", "guy ", "lady ", "ladies", "gentleman",
    )),
    # 12 Lifestyle
    CategoryRule(12, (
        "lifestyle", "home ", "everyday", "daily life", "routine", "living room", "bedroom",
        "cozy", "cosy", "relax", "weekend", "self care", "household", "domestic",
        "shopping", "fashion", "clothing", "apartment ", "cleaning", "laundry", "hygge",
        "comfortable", "wellness",
    )),
    # 3 Business
    CategoryRule(3, (
        "business", "office", "corporate", "finance", "financial", "money", "banking",
        "bank ", "investment", "investing", "stock market", "economy", "economic",
        "marketing", "startup", "meeting", "teamwork", "entrepreneur", "contract",
        "presentation", "profit", "budget", "accounting", "tax ", "taxes", "coworking",
        "workplace", "career", "job interview", "handshake", "sales ", "ecommerce",
        "e commerce", "currency", "coin ", "coins ", "cryptocurrency",
    )),
    # 7 Food
    CategoryRule(7, (
        "food", "meal", "dish ", "dishes", "cooking", "cook ", "cooked", "recipe",
        "cuisine", "breakfast", "lunch", "dinner", "snack", "dessert", "cake", "bread",
        "pizza", "pasta", "burger", "sandwich", "salad", "soup", "fruit", "vegetable",
        "meat ", "steak", "chicken", "fish ", "seafood", "sushi", "rice ", "noodle",
        "cheese", "chocolate", "cookie", "baking", "bakery", "restaurant", "delicious",
        "tasty", "gourmet", "berries", "strawberr", "tomato", "egg ", "eggs ", "honey ",
        "spice", "grill",
    )),
    # 4 Drinks
    CategoryRule(4, (
        "drink", "beverage", "coffee", "tea ", "teas ", "teapot", "espresso", "cappuccino",
        "latte", "juice", "smoothie", "cocktail", "wine", "beer", "whiskey", "whisky",
        "vodka", "champagne", "soda ", "lemonade", "milk ", "milkshake", "bottle",
        "brewery", "barista", "coffee shop",
    )),
    # 18 Sports
    CategoryRule(18, (
        "sport", "fitness", "training", "workout", "gym ", "exercise", "athlete",
        "football", "soccer", "basketball", "tennis", "golf", "baseball", "volleyball",
        "hockey", "rugby", "running ", "runner", "marathon", "cycling", "cyclist",
        "swimming", "swimmer", "yoga", "boxing", "martial arts", "karate", "skiing",
        "ski ", "skier", "snowboard", "surfing", "surfer", "skateboard", "climbing",
        "stadium", "olympic", "championship", "jogging", "crossfit", "dumbbell",
        "weightlifting",
    )),
    # 19 Technology
    CategoryRule(19, (
        "technology", "tech ", "digital", "computer", "laptop", "smartphone", "phone ",
        "phones ", "tablet", "device", "gadget", "software", "internet", "network",
        "cyber", "artificial intelligence", "machine learning", "neural network",
        "robot", "chatbot", "data ", "server", "circuit", "microchip", "electronic",
        "coding", "programming", "virtual reality", "vr ", "drone", "innovation",
        "hologram", "blockchain", "5g ", "cloud computing", "keyboard",
    )),
    # 8 Graphic Resources
    CategoryRule(8, (
        "pattern", "texture", "template", "abstract", "background", "backdrop",
        "seamless", "vector", "illustration", "wallpaper", "mockup", "mock up", "banner",
        "icon ", "icons ", "gradient", "geometric", "clipart", "clip art", "design element",
        "3d render", "bokeh", "grunge", "logo",
    )),
    # 10 Industry
    CategoryRule(10, (
        "industry", "industrial", "factory", "manufacturing", "manufacture", "warehouse",
        "machinery", "machine ", "production line", "assembly line", "engineer",
        "construction", "welding", "welder", "steel", "metalwork", "refinery",
        "power plant", "mining", "forklift", "heavy equipment", "shipping container",
        "logistics",
    )),
    # 5 The Environment
    CategoryRule(5, (
        "environment", "pollution", "polluted", "climate", "global warming", "recycl",
        "sustainab", "renewable", "solar panel", "wind turbine", "ecology", "ecological",
        "eco ", "carbon", "emission", "deforestation", "plastic waste", "waste", "garbage",
        "trash", "conservation", "green energy", "drought", "wildfire", "earth day",
        "zero waste",
    )),
    # 17 Social Issues
    CategoryRule(17, (
        "protest", "demonstration", "poverty", "poor ", "homeless", "inequality",
        "discrimination", "racism", "equality", "human rights", "refugee", "immigration",
        "migrant", "unemploy", "war ", "violence", "abuse", "bullying", "activism",
        "activist", "charity", "donation", "volunteer", "diversity", "lgbt", "feminism",
        "social justice", "addiction", "election", "corruption",
    )),
    # 16 Science
    CategoryRule(16, (
        "science", "scientific", "scientist", "laboratory", "lab ", "labs ", "experiment",
        "research", "molecule", "molecular", "chemistry", "chemical", "physics", "biology",
        "microscope", "dna ", "test tube", "atom", "microbiology", "virus", "bacteria",
        "medicine", "medical", "pharmaceutical", "vaccine", "astronomy", "outer space",
        "galaxy", "planet", "astronaut", "telescope", "genetic",
    )),
    # 15 Culture and Religion
    CategoryRule(15, (
        "religion", "religious", "temple", "mosque", "synagogue", "prayer", "pray ",
        "praying", "faith", "spiritual", "god ", "gods ", "buddha", "buddhist",
        "christian", "islam", "muslim", "hindu", "jewish", "bible", "tradition",
        "culture", "cultural", "festival", "ceremony", "ritual", "folk ", "heritage",
        "ethnic", "christmas", "easter", "ramadan", "diwali", "halloween", "hanukkah",
        "carnival", "wedding", "kimono",
    )),
    # 9 Hobbies and Leisure
    CategoryRule(9, (
        "hobby", "hobbies", "craft ", "crafts ", "crafting", "handicraft", "diy ",
        "knitting", "sewing", "crochet", "painting", "gardening", "fishing", "camping",
        "hiking", "gaming", "video game", "board game", "chess", "puzzle", "guitar",
        "piano", "violin", "drum ", "drums ", "musical instrument", "photography",
        "photographer", "reading ", "book ", "books ", "toy ", "toys ", "lego",
        "pottery", "ceramics", "woodworking", "origami", "scrapbook", "embroidery",
        "leisure", "pastime", "playing cards", "dancing", "karaoke",
    )),
]


def classify(
    title: str,
    keywords: Sequence[str],
    model_category: Any,
    rules: Sequence[CategoryRule] = DEFAULT_RULES,
    fallback: int = DEFAULT_FALLBACK,
) -> int:
    """
    依規則表重新判定分類；第一條命中的規則勝出（不是多數決）。
    沒有任何規則命中時，回傳正規化後的 model_category。
    """
    haystack = build_haystack(title, keywords)
    for rule in rules:
        if rule.matches(haystack):
            return rule.category
    return coerce_category(model_category, fallback)
