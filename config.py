# config.py
from datetime import timedelta

# ==== Feature vector (fixed order used by the normalizer and the model) ====
FEATURES = [
    "water_temperature",
    "salinity",
    "ph_level",
    "dissolved_oxygen",
    "turbidity",
    "nitrate",
]

# ==== CSV layout expected from the upstream logger export ====
CSV_COLUMNS = [
    "date", "location",
    "water_temperature_c", "salinity_psu", "ph_level",
    "dissolved_oxygen_mg_l", "turbidity_ntu", "nitrate_mg_l",
]

# ==== Forecast window ====
FORECAST_STEPS = 5
MAX_FORECAST_STEPS = 30
DEFAULT_TIME_STEP = timedelta(days=1)
DEFAULT_ORDINAL_STEP = 1.0

# ==== Training ====
TRAIN_EPOCHS = 150
BATCH_SIZE_DIVISOR = 10
HIDDEN_LAYERS = (64, 32)
LEARNING_RATE = 0.001
MIN_TRAIN_RECORDS = 2
NORM_EPSILON = 1e-7

# ==== Forecast jitter (full width, applied as uniform(-0.5, 0.5) * amp) ====
JITTER = {
    "water_temperature": 0.1,
    "salinity": 0.1,
    "ph_level": 0.01,
    "dissolved_oxygen": 0.1,
    "turbidity": 0.05,
    "nitrate": 0.01,
}

# ==== Hard clamps on forecasted values ====
PH_BOUNDS = (7.0, 9.0)
MEASUREMENT_FLOOR = 0.0

# ==== Physically possible ranges accepted at ingestion ====
INGEST_BOUNDS = {
    "water_temperature": (-5.0, 50.0),
    "salinity": (0.0, 60.0),
    "ph_level": (0.0, 14.0),
    "dissolved_oxygen": (0.0, 30.0),
    "turbidity": (0.0, 4000.0),
    "nitrate": (0.0, 500.0),
}

# ==== Suitability index → status label ====
STATUS_SUITABLE_MIN = 80
STATUS_WARNING_MIN = 50

# ==== Environment ====
THRESHOLDS_FILE_ENV = "REEF_THRESHOLDS_FILE"
LOG_LEVEL_ENV = "REEF_LOG_LEVEL"
PORT_ENV = "PORT"
DEFAULT_PORT = 8080
