"""Fixed thresholds of the allocation model."""

# Share of income above which minimum debt payments count as a heavy burden
DEBT_SERVICE_LIMIT = 0.36

# Health score
HEALTH_COMPONENT_MAX = 25.0
HEALTH_RATIO_TARGET = 0.2
HEALTH_RATIO_SCALE = 125.0
HEALTH_DEBT_PENALTY_SCALE = 100.0

# Emergency fund
EMERGENCY_CRITICAL_RATIO = 0.25
EMERGENCY_URGENT_FACTOR = 0.4
EMERGENCY_NORMAL_FACTOR = 0.2
EMERGENCY_LOW_RATIO = 0.5

# Debt paydown
DEBT_EXTRA_HEAVY_FACTOR = 0.6
DEBT_EXTRA_NORMAL_FACTOR = 0.3

# Savings goals
ON_TRACK_TOLERANCE = 0.01

# Residual split
GENERAL_SAVINGS_SHARE = 0.3

# Narrative
TIGHT_CASH_RATIO = 0.1
LOOSE_CASH_RATIO = 0.4
MIN_SAVINGS_RATIO = 0.1
