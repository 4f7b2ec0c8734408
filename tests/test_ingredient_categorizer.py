# tests/test_ingredient_categorizer.py
import pytest

from meal_optimizer.services.ingredient_categorizer import CATEGORIES, OTHERS, categorize


@pytest.mark.parametrize("ingredient, category", [
    ("paneer", "Protein"),
    ("200g Paneer cubes", "Protein"),
    ("olive oil", "Oils"),
    ("quinoa", "Grains"),
    ("CHICKEN breast", "Protein"),
    ("2 cups basmati rice", "Grains"),
    ("spinach", "Fruits & Vegetables"),
    ("Greek yogurt", "Dairy"),
    ("1 tsp turmeric", "Spices"),
    ("black pepper", "Spices"),
    ("honey", "Sweeteners"),
    ("almonds", "Nuts & Seeds"),
    ("eggplant", "Fruits & Vegetables"),
    ("2 eggs", "Protein"),
])
def test_categorize(ingredient, category):
    assert categorize(ingredient) == category


@pytest.mark.parametrize("ingredient, category", [
    ("peanut butter", "Nuts & Seeds"),
    ("2 tbsp almond butter", "Nuts & Seeds"),
    ("Almond Milk", "Nuts & Seeds"),
    ("coconut milk", "Nuts & Seeds"),
    ("soy milk", "Protein"),
    ("apple cider vinegar", "Spices"),
    ("rice vinegar", "Spices"),
    ("unsalted butter", "Dairy"),
    ("whole milk", "Dairy"),
    ("buttermilk", "Dairy"),
    ("green apple", "Fruits & Vegetables"),
    ("coconut oil", "Oils"),
])
def test_plant_milks_nut_butters_and_vinegars(ingredient, category):
    assert categorize(ingredient) == category


def test_unmatched_text_falls_into_others():
    assert categorize("water") == OTHERS
    assert categorize("xyz") == OTHERS


def test_paneer_matches_protein_before_dairy():
    # paneer is a cheese, but the Protein set is tested first
    assert categorize("fresh paneer") == "Protein"


def test_every_input_gets_one_of_the_fixed_categories():
    samples = ["ghee", "Maple Syrup", "cumin seeds", "Wholewheat bread", "???", "Lime", "cream cheese"]

    for sample in samples:
        assert categorize(sample) in CATEGORIES
    assert len(CATEGORIES) == 9
