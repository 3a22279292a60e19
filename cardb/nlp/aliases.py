# cardb/nlp/aliases.py

# Colloquial names and common typos -> canonical name in settings.KNOWN_BRANDS
BRAND_ALIAS = {
    "vw": "Volkswagen",
    "vokswagen": "Volkswagen",
    "volkswagon": "Volkswagen",
    "mercedes": "Mercedes-Benz",
    "merc": "Mercedes-Benz",
    "benz": "Mercedes-Benz",
    "mercedesbenz": "Mercedes-Benz",
    "chevy": "Chevrolet",
    "bimmer": "BMW",
    "bmv": "BMW",
    "landrover": "Land Rover",
    "range rover": "Land Rover",
    "rangerover": "Land Rover",
    "vin fast": "VinFast",
    "lambo": "Lamborghini",
    "toyoya": "Toyota",
    "hunday": "Hyundai",
    "huyndai": "Hyundai",
}

# Tokens never treated as a brand candidate
STOPWORDS = {
    "looking", "want", "need", "find", "show", "under", "over", "below", "above",
    "with", "from", "that", "this", "have", "some", "cars", "auto", "vehicle",
    "cheap", "good", "best", "family", "seater", "seats", "price", "million",
    "billion", "budget", "model", "brand", "hybrid", "electric", "diesel",
    "sedan", "coupe", "truck", "wagon", "manual", "automatic",
}

# Budget phrasing without a concrete number/brand triggers a clarifying question
BUDGET_KEYWORDS = (
    "cheap", "cheapest", "cheaper", "affordable", "budget", "inexpensive", "low cost", "low-cost",
    "low price", "bargain", "not too expensive", "reasonably priced",
)
