# cardb/texts.py
WELCOME_MSG = (
    "Hi! I'm your car marketplace assistant. I can help you:\n"
    "• Find cars (e.g. *Toyota SUV under 900 million*)\n"
    "• Answer questions about warranty, returns, financing and delivery\n"
    "• Troubleshoot common vehicle issues"
)

REFUSAL_MSG = (
    "I'm sorry, but I can't help with that request. "
    "I'm here to help you find cars, answer questions about our policies, "
    "and give basic vehicle troubleshooting tips."
)

BUDGET_CLARIFY_MSG = (
    "Happy to help you find an affordable car! To narrow it down, could you tell me: "
    "1) your budget (for example, under 500 million VND), "
    "2) the fuel type you prefer (Gasoline, Diesel, Hybrid, Plug-in Hybrid or Electric), "
    "3) the body type (Sedan, SUV, Hatchback, Truck, Van...), and "
    "4) any brand or model you have in mind?"
)

NO_RESULTS_BRAND_MSG = (
    "I'm sorry, we don't have any verified {brand} listings in our inventory right now. "
    "You could try a similar brand, or check back soon as new cars are listed every day."
)

NO_RESULTS_BUDGET_MSG = (
    "I couldn't find any cars matching those criteria under {max_price} {currency}. "
    "You might consider increasing your budget a little or relaxing some of the other filters."
)

NO_RESULTS_GENERIC_MSG = (
    "I couldn't find any cars matching those exact criteria in our current inventory. "
    "You might consider adjusting the body type, fuel type, year or location."
)
