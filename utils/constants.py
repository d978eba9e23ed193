"""
Constants for marine chemistry seed calculations.

All concentrations are in umol/kg unless a name says otherwise.
"""

# Seawater density used for volumetric -> gravimetric conversions (kg/L)
SEAWATER_DENSITY_KG_L = 1.025

# Units string attached to every seed
SEED_UNITS = "Concentrations in umol/kg (or equivalent)"

# Half-saturation constants for oxygen inhibition of anaerobic processes (umol/kg O2)
K_DENITRIFICATION = 5.0     # nitrate reduction, anammox, nitrification suppression
K_METAL_REDUCTION = 10.0    # Fe(III)/Mn(IV) reduction
K_SULFATE_REDUCTION = 0.2   # sulfate reduction only near anoxia

# Bimolecular anammox rate constant (kg/umol), applied to NO2 * NH4
ANAMMOX_RATE_CONSTANT = 0.1

# Respiratory C:O2 ratio used to convert AOU into respired CO2
RESPIRATORY_C_TO_O2 = 0.77

# Henry's law constant for CO2 at 298.15 K (mol/L/atm) and its van't Hoff slope (K)
HENRY_K0_CO2_298 = 0.034
HENRY_CO2_TEMPERATURE_SLOPE_K = 2400.0
REFERENCE_TEMPERATURE_K = 298.15
KELVIN_OFFSET = 273.15

# Empirical pH model
PH_BASELINE = 8.25
PH_PCO2_REFERENCE_UATM = 280.0    # pre-industrial
PH_PCO2_SLOPE = -0.001            # pH units per uatm
PH_TEMPERATURE_REFERENCE_C = 15.0
PH_TEMPERATURE_SLOPE = -0.005     # pH units per degC

# Depth zones for organic matter composition (m, upper bounds inclusive)
EUPHOTIC_MAX_DEPTH_M = 150.0
MESOPELAGIC_MAX_DEPTH_M = 1000.0

# Unit conversion factors
NMOL_TO_UMOL = 1e-3
MMOL_PER_MOL_TO_MOL_PER_MOL = 1e-3

# Suffix marking a canonical external metabolite identifier
CANONICAL_SUFFIX = "_e"

# Internal compound key -> canonical metabolite identifier
METABOLITE_NAME_MAP = {
    # Macronutrients
    "phosphate": "pi_e",
    "silicate": "si_e",
    "ammonium": "nh4_e",
    # Redox-sensitive species
    "nitrate": "no3_e",
    "nitrite": "no2_e",
    "sulfate": "so4_e",
    "sulfide": "h2s_e",
    "iron": "fe2_e",
    "manganese": "mn2_e",
    # Micronutrients
    "Zn": "zn2_e",
    "Cd": "cd2_e",
    "Ni": "ni2_e",
    "Cu": "cu2_e",
    "Co": "cobalt2_e",
    "B1": "thm_e",
    "B12": "cbl1_e",
    # Dissolved organic pools
    "DON": "don_e",
    "DOP": "dop_e",
    # Physical/chemical
    "dissolved_co2": "co2_e",
    "oxygen": "o2_e",
}

# Cofactors that are never boundary species
CURRENCY_METABOLITES = frozenset([
    "atp_e", "adp_e", "amp_e",
    "nad_e", "nadh_e", "nadp_e", "nadph_e",
    "coa_e", "ppi_e", "h_e", "h2o_e",
    "fad_e", "fadh2_e",
])

PROTON_ID = "h_e"

# Biochemical class composition of organic matter (% of pool carbon)
# zone -> productivity group ("all" below the euphotic zone) -> pool -> class
BIOCHEMICAL_COMPOSITION = {
    "euphotic": {
        "productive": {
            "POM": {"protein": 45, "carbohydrate": 30, "lipid": 12},
            "DOM": {"protein": 15, "carbohydrate": 35, "lipid": 8},
        },
        "oligotrophic": {
            "POM": {"protein": 30, "carbohydrate": 40, "lipid": 17},
            "DOM": {"protein": 10, "carbohydrate": 25, "lipid": 7},
        },
    },
    "mesopelagic": {
        "all": {
            "POM": {"protein": 20, "carbohydrate": 15, "lipid": 7},
            "DOM": {"protein": 5, "carbohydrate": 15, "lipid": 3},
        },
    },
    "deep": {
        "all": {
            "POM": {"protein": 8, "carbohydrate": 8, "lipid": 3},
            "DOM": {"protein": 2, "carbohydrate": 4, "lipid": 1},
        },
    },
}

# Monomer composition of each biochemical class (% of class carbon)
MONOMER_COMPOSITION = {
    "protein": {"gly_e": 30, "ala_L_e": 25, "leu_L_e": 20, "ser_L_e": 15, "thr_L_e": 10},
    "carbohydrate": {"glc_D_e": 60, "fru_e": 20, "xyl_D_e": 10, "arab_L_e": 10},
    "lipid": {"hdca_e": 50, "hdcea_e": 30, "ocdca_e": 20},
}

# Dissolved organic matter stoichiometry by depth zone (molar C:N and C:P)
DOM_STOICHIOMETRY = {
    "euphotic": {"CN": 14.0, "CP": 150.0},
    "mesopelagic": {"CN": 25.0, "CP": 500.0},
    "deep": {"CN": 40.0, "CP": 1500.0},
}
