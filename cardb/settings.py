import os

# Enums of the listings schema (CarPost)
BODY_TYPES = ["Sedan", "SUV", "Truck", "Coupe", "Hatchback", "Van", "Wagon", "Convertible"]
FUEL_TYPES = ["Gasoline", "Diesel", "Electric", "Hybrid", "Plug-in Hybrid"]
TRANSMISSIONS = ["Automatic", "Manual"]

# Canonical brand names, in detection order. Multi-word and local makes
# go first so "land rover" is not shadowed by a shorter match.
KNOWN_BRANDS = [
    "Mercedes-Benz", "Land Rover", "Rolls-Royce", "Aston Martin", "Alfa Romeo",
    "VinFast", "Toyota", "Honda", "Hyundai", "Kia", "Mazda", "Mitsubishi",
    "Nissan", "Suzuki", "Subaru", "Isuzu", "Ford", "Chevrolet", "Volkswagen",
    "BMW", "Audi", "Lexus", "Porsche", "Volvo", "Peugeot", "Tesla", "Jeep",
    "Jaguar", "Ferrari", "Lamborghini", "Bentley", "Maserati", "Genesis",
    "Infiniti", "Acura", "Cadillac", "Dodge", "Chrysler", "Buick", "GMC",
    "Lincoln", "MG", "BYD",
]

# Search
RESULT_LIMIT = 5
DEFAULT_MIN_MPG = 30
CURRENCY = "VND"

# Only what the reply needs to see
LISTING_FIELDS = [
    "make", "model", "year", "price", "body_type", "fuel_type", "transmission",
    "miles", "dealer.city", "dealer.state", "std_seating", "highway_mpg", "city_mpg",
]

# Dealer policies quoted verbatim by the policy branch
POLICY_FACTS = (
    "Warranty: 6 months on new and used cars; 8 years on EV batteries. "
    "Returns: 7-day return window. "
    "Financing: 10% down payment, 3.5-9% APR. "
    "Delivery: free within 50 km."
)

# Model sampling
EXTRACT_TEMPERATURE = float(os.getenv("EXTRACT_TEMPERATURE", "0"))
REPLY_TEMPERATURE = float(os.getenv("REPLY_TEMPERATURE", "0.4"))
