"""Static per-100g nutrition reference table.

Values are per 100 g of edible portion unless the note says otherwise and are
based on common food composition tables. Aliases include the Chinese names so
that ingredient lists typed in either language match.
"""

from diet_planner.domain.nutrition import NutritionFact

FOOD_NUTRITION_DB: tuple[NutritionFact, ...] = (
    # Grains and tubers
    NutritionFact("rice", 130, 2.7, 0.3, 28.2, ("white rice", "steamed rice", "米饭"), "cooked"),
    NutritionFact("brown rice", 112, 2.6, 0.9, 23.5, ("糙米饭", "糙米"), "cooked"),
    NutritionFact("oats", 389, 16.9, 6.9, 66.3, ("oatmeal", "rolled oats", "燕麦", "麦片")),
    NutritionFact("whole wheat bread", 246, 10.7, 3.5, 45.8, ("toast", "全麦面包", "吐司")),
    NutritionFact("noodles", 284, 9.6, 0.7, 61.9, ("wheat noodles", "面条", "挂面")),
    NutritionFact("potato", 77, 2.0, 0.1, 17.5, ("potatoes", "土豆", "马铃薯"), "cooked"),
    NutritionFact("sweet potato", 86, 1.6, 0.1, 20.1, ("yam", "红薯", "地瓜"), "cooked"),
    NutritionFact("corn", 86, 3.3, 1.2, 19.0, ("sweet corn", "玉米"), "cooked"),
    NutritionFact("steamed bun", 221, 7.0, 1.1, 45.7, ("mantou", "馒头")),
    NutritionFact("stuffed bun", 220, 7.2, 5.5, 35.6, ("baozi", "包子")),
    # Meat, poultry and eggs
    NutritionFact("chicken breast", 133, 31.0, 1.2, 0, ("鸡胸肉", "鸡胸"), "cooked"),
    NutritionFact("chicken thigh", 211, 26.0, 11.0, 0, ("chicken leg", "鸡腿肉", "鸡腿"), "cooked, skin on"),
    NutritionFact("beef brisket", 250, 26.0, 15.0, 0, ("beef", "牛腩", "牛肉"), "cooked"),
    NutritionFact("lean pork", 143, 21.0, 6.2, 0, ("pork loin", "pork tenderloin", "猪瘦肉", "里脊"), "cooked"),
    NutritionFact("pork ribs", 278, 18.0, 23.0, 0, ("spare ribs", "排骨"), "cooked"),
    NutritionFact("egg", 155, 13.0, 11.0, 1.1, ("eggs", "boiled egg", "鸡蛋"), "edible portion"),
    NutritionFact("sausage", 300, 12.0, 27.0, 4.0, ("香肠", "腊肠"), "cooked"),
    NutritionFact("salmon", 208, 20.0, 13.0, 0, ("三文鱼",), "raw"),
    NutritionFact("shrimp", 99, 24.0, 0.3, 0.2, ("prawn", "虾仁", "虾"), "cooked"),
    # Dairy and soy
    NutritionFact("milk", 54, 3.0, 3.2, 3.4, ("whole milk", "牛奶", "鲜奶"), "whole, per 100 ml"),
    NutritionFact("yogurt", 72, 2.5, 2.7, 9.3, ("plain yogurt", "酸奶")),
    NutritionFact("soy milk", 31, 2.9, 1.6, 1.1, ("豆浆",), "per 100 ml"),
    NutritionFact("tofu", 76, 8.1, 4.2, 1.9, ("bean curd", "豆腐")),
    NutritionFact("dried tofu", 140, 16.2, 9.7, 3.6, ("豆腐干", "香干")),
    # Vegetables
    NutritionFact("broccoli", 34, 2.8, 0.4, 7.0, ("西兰花", "西蓝花"), "cooked"),
    NutritionFact("spinach", 23, 2.9, 0.4, 3.6, ("leafy greens", "菠菜", "青菜"), "cooked"),
    NutritionFact("lettuce", 15, 1.4, 0.2, 2.9, ("生菜",), "raw"),
    NutritionFact("cucumber", 15, 0.7, 0.1, 3.6, ("黄瓜",), "raw"),
    NutritionFact("tomato", 18, 0.9, 0.2, 3.9, ("tomatoes", "番茄", "西红柿"), "raw"),
    NutritionFact("white radish", 20, 0.9, 0.1, 4.7, ("daikon", "radish", "萝卜", "白萝卜"), "raw"),
    NutritionFact("carrot", 41, 0.9, 0.2, 9.6, ("carrots", "胡萝卜"), "raw"),
    NutritionFact("eggplant", 25, 1.2, 0.2, 6.0, ("aubergine", "茄子"), "cooked"),
    NutritionFact("bell pepper", 20, 1.1, 0.2, 4.6, ("green pepper", "青椒", "彩椒"), "raw"),
    NutritionFact("onion", 40, 1.1, 0.1, 9.4, ("洋葱",), "raw"),
    NutritionFact("mung beans", 105, 7.4, 0.5, 19.2, ("绿豆",), "cooked"),
    # Fruit
    NutritionFact("blueberry", 57, 0.7, 0.3, 14.5, ("blueberries", "蓝莓")),
    NutritionFact("apple", 52, 0.3, 0.2, 14.0, ("apples", "苹果")),
    NutritionFact("banana", 89, 1.1, 0.3, 22.8, ("bananas", "香蕉")),
    NutritionFact("orange", 47, 0.9, 0.1, 11.8, ("oranges", "橙子")),
    # Fats and others
    NutritionFact("cooking oil", 884, 0, 100.0, 0, ("vegetable oil", "olive oil", "食用油", "植物油")),
    NutritionFact("mixed nuts", 600, 15.0, 55.0, 20.0, ("nuts", "walnut", "almond", "坚果"), "approximate"),
    NutritionFact("green salad", 35, 1.5, 2.0, 4.0, ("salad", "沙拉"), "without dressing, approximate"),
)

BASELINE_FOOD_NAMES: frozenset[str] = frozenset(
    {
        "rice",
        "oats",
        "whole wheat bread",
        "egg",
        "chicken breast",
        "beef brisket",
        "milk",
        "tofu",
        "potato",
        "broccoli",
        "spinach",
        "tomato",
        "cooking oil",
        "cucumber",
        "white radish",
        "pork ribs",
    }
)
