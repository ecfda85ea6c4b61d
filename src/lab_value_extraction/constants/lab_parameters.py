# ============================================================================
# src/lab_value_extraction/constants/lab_parameters.py
# ============================================================================
"""
Built-in Lab Parameter Table

Renal panel parameters read from scanned lab reports:
- Aliases as they appear on the reports (order matters: first alias wins)
- Valid numeric ranges (inclusive)
- Accepted numeric formats (the whole token must match)

Dict insertion order is the registration order of the registry.
"""

PARAMETER_ALIASES = {
    "Creatinine": ["Creatinine"],
    "eGFR": ["eGFR", "Glomerular Filtration Rate"],
    "Potassium": ["Potassium", "K+"],
    "Bicarb": ["Carbon Dioxide", "CO2", "Bicarb"],
    "Intact PTH": ["Intact PTH", "PTH"],
    "Vitamin D": ["Vitamin D"],
    "Urine Protein": ["Urine Protein", "Protein, Urine"],
    "Urine Creatinine": ["Urine Creatinine", "Creatinine, Urine"],
    "Urine Albumin": ["Urine Albumin", "Albumin, Urine"],
    "Hemoglobin": ["Hemoglobin", "Hgb"],
    "Iron": ["Iron"],
    "TIBC": ["TIBC", "Total Iron Binding Capacity"],
    "Ferritin": ["Ferritin"],
}

# (min, max)
VALIDATION_RANGES = {
    "Creatinine": (0.5, 5.0),
    "eGFR": (0, 150),
    "Potassium": (2.5, 6.5),
    "Bicarb": (10, 40),
    "Intact PTH": (0, 150),
    "Vitamin D": (10, 100),
    "Urine Protein": (0, 300),
    "Urine Creatinine": (0, 300),
    "Hemoglobin": (5, 20),
    "Iron": (10, 300),
    "TIBC": (100, 600),
    "Ferritin": (10, 1000),
}

PARAMETER_FORMATS = {
    "Creatinine": r"\d+\.\d{2}",
    "eGFR": r"\d{2}",
    "Potassium": r"\d+\.\d",
    "Bicarb": r"\d{2}",
    "Intact PTH": r"\d{2}",
    "Vitamin D": r"\d{2}\.\d",
    "Urine Protein": r"\d{2}\.\d",
    "Urine Creatinine": r"\d{2}\.\d",
    "Hemoglobin": r"\d{2}\.\d",
    "Iron": r"\d{2}",
}
