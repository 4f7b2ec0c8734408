# meal_optimizer/services/ingredient_categorizer.py
import re
from typing import List, Pattern, Tuple

OTHERS = "Others"

# plant milks and nut butters are not dairy
_PLANT_MILK_GUARD = r"(?<!almond )(?<!cashew )(?<!coconut )(?<!oat )(?<!rice )(?<!soy )"
_NUT_BUTTER_GUARD = r"(?<!almond )(?<!cashew )(?<!nut )(?<!peanut )"

# Order matters: the first category whose pattern matches wins
# (e.g. "paneer" is Protein even though it is also dairy).
_CATEGORY_PATTERNS: List[Tuple[str, List[str]]] = [
    ("Protein", [
        r"chicken", r"beef", r"pork", r"lamb", r"mutton", r"turkey", r"bacon", r"\bham\b", r"sausage",
        r"fish", r"salmon", r"tuna", r"\bcod\b", r"sardine", r"shrimp", r"prawn", r"crab", r"lobster",
        r"\beggs?\b", r"egg whites?", r"tofu", r"tempeh", r"seitan", r"paneer", r"soya chunks?",
        r"lentils?", r"\bdal\b", r"\bdaal\b", r"soy milk", r"chickpeas?", r"chana", r"rajma", r"kidney beans?",
        r"black beans?", r"pinto beans?", r"edamame", r"protein powder", r"whey",
    ]),
    ("Grains", [
        r"\brice\b(?!\s+(wine|vinegar))", r"quinoa", r"\boats?\b", r"oatmeal", r"barley", r"millet", r"wheat",
        r"flour", r"\bbread\b", r"bagel", r"tortilla", r"\bpasta\b", r"spaghetti", r"noodles?", r"couscous",
        r"bulgur", r"semolina", r"\bsooji\b", r"\brava\b", r"poha", r"roti", r"chapati", r"naan",
        r"cornmeal", r"polenta", r"granola", r"cereal", r"crackers?", r"buckwheat",
    ]),
    ("Fruits & Vegetables", [
        r"tomato", r"onion", r"garlic", r"ginger", r"potato", r"carrot", r"spinach", r"kale",
        r"lettuce", r"cabbage", r"broccoli", r"cauliflower", r"bell peppers?", r"capsicum", r"cucumber",
        r"zucchini", r"eggplant", r"brinjal", r"aubergine", r"mushroom", r"\bpeas\b", r"green beans?",
        r"okra", r"celery", r"beetroot", r"\bbeets?\b", r"pumpkin", r"squash", r"asparagus", r"\bcorn\b",
        r"avocado", r"apple(?!\s+cider)", r"banana", r"berr(y|ies)", r"orange", r"lemon", r"lime", r"mango",
        r"grapes?", r"pineapple", r"papaya", r"pomegranate", r"kiwi", r"melon", r"\bpears?\b", r"peach",
        r"coriander leaves", r"cilantro", r"parsley", r"basil", r"mint", r"scallions?", r"leeks?",
        r"green chill(i|ies)", r"radish", r"sweet potato", r"dates\b", r"raisins?",
    ]),
    ("Dairy", [
        _PLANT_MILK_GUARD + r"\bmilk\b", _NUT_BUTTER_GUARD + r"butter\b", r"cheese", r"yogh?urt", r"\bcurd\b",
        r"\bcream\b", r"buttermilk", r"sour cream", r"cream cheese", r"mozzarella", r"parmesan", r"cheddar",
        r"feta", r"ricotta", r"khoya", r"kefir",
    ]),
    ("Oils", [
        r"\boil\b", r"\bghee\b", r"olive oil", r"coconut oil", r"mustard oil", r"cooking spray",
        r"margarine", r"lard",
    ]),
    ("Spices", [
        r"\bsalt\b", r"pepper\b", r"cumin", r"turmeric", r"paprika", r"chilli powder", r"chili powder",
        r"garam masala", r"masala", r"coriander", r"cinnamon", r"cardamom", r"clove", r"nutmeg",
        r"oregano", r"thyme", r"rosemary", r"bay lea(f|ves)", r"mustard seeds?", r"fenugreek",
        r"asafoetida", r"\bhing\b", r"curry powder", r"curry leaves", r"saffron", r"spice", r"seasoning",
        r"vinegar", r"soy sauce", r"baking powder", r"baking soda", r"vanilla",
    ]),
    ("Sweeteners", [
        r"sugar", r"honey", r"maple syrup", r"agave", r"jaggery", r"stevia", r"molasses", r"syrup",
        r"sweetener",
    ]),
    ("Nuts & Seeds", [
        r"almonds?", r"cashews?", r"walnuts?", r"peanuts?", r"pistachios?", r"pecans?", r"hazelnuts?",
        r"\bnuts?\b", r"chia", r"flax", r"sesame", r"sunflower seeds?", r"pumpkin seeds?", r"seeds?\b",
        r"tahini", r"coconut",
    ]),
]

_COMPILED: List[Tuple[str, Pattern]] = [
    (category, re.compile("|".join(patterns), re.IGNORECASE))
    for category, patterns in _CATEGORY_PATTERNS
]

CATEGORIES: List[str] = [category for category, _ in _CATEGORY_PATTERNS] + [OTHERS]


def categorize(ingredient: str) -> str:
    """Classify a free-text ingredient into one of the fixed grocery categories"""
    for category, pattern in _COMPILED:
        if pattern.search(ingredient):
            return category
    return OTHERS
