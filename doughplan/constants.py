"""Empirical constants shared by the formulation and scheduling modules."""

from __future__ import annotations

PERCENTAGE_BASE = 100.0

# Absolute request bounds (inclusive)
MIN_HYDRATION = 45.0
MAX_HYDRATION = 95.0
MIN_SALT = 1.0
MAX_SALT = 5.0
MAX_OIL = 15.0
MAX_SUGAR = 10.0
MAX_EXTRA_PERCENTAGE = 30.0
MIN_FERMENTATION_HOURS = 1.0
MAX_FERMENTATION_HOURS = 168.0
MIN_BALL_WEIGHT = 50.0
MAX_BALL_WEIGHT = 3000.0
MIN_ROOM_TEMPERATURE = 5.0
MAX_ROOM_TEMPERATURE = 40.0
MIN_FRIDGE_TEMPERATURE = 0.0
MAX_FRIDGE_TEMPERATURE = 12.0
MAX_ALTITUDE = 5000.0

# Temperatures (°C)
DEFAULT_ROOM_TEMPERATURE = 22.0
DEFAULT_FRIDGE_TEMPERATURE = 4.0
DEFAULT_DOUGH_TEMPERATURE = 24.0
HIGH_TEMPERATURE_THRESHOLD = 26.0
VERY_HIGH_TEMPERATURE_THRESHOLD = 28.0
LOW_TEMPERATURE_THRESHOLD = 18.0

# Preferment
DEFAULT_PREFERMENT_PERCENTAGE = 30.0
DEFAULT_PREFERMENT_HOURS = 12.0

# Environmental corrections
BASE_HUMIDITY = 50.0
BASE_PRESSURE_HPA = 1013.25
BAROMETRIC_SCALE_HEIGHT = 8500.0
HUMIDITY_CORRECTION_FACTOR = 0.05
MIN_HYDRATION_CORRECTION = -3.0
MAX_HYDRATION_CORRECTION = 3.0
ALTITUDE_THRESHOLD_METERS = 500.0
YEAST_CORRECTION_PER_1000M = 5.0
MAX_YEAST_CORRECTION = -20.0
FERMENTATION_CORRECTION_PER_1000M = 8.0
TEMP_CORRECTION_FACTOR = 5.0
MIN_FERMENTATION_CORRECTION = -30.0
MAX_FERMENTATION_CORRECTION = 50.0
HIGH_HUMIDITY_THRESHOLD = 70.0
LOW_HUMIDITY_THRESHOLD = 30.0

# Q10 model: activity doubles every 10 °C
Q10_FACTOR = 2.0
TEMP_BASE_DIFF = 10.0

# Cold activity relative to room temperature: 0.05 at 0 °C, 0.15 at 4 °C
COLD_ACTIVITY_BASE = 0.05
COLD_ACTIVITY_MULTIPLIER = 0.025

# Schedule durations (minutes)
MIXING_TIME_MINUTES = 10
KNEADING_TIME_MINUTES = 15
BALLING_TIME_MINUTES = 15
SHAPING_TIME_MINUTES = 15
ADD_SALT_MINUTES = 5
FOLD_MINUTES = 5
FINAL_REST_COLD_MINUTES = 120
FINAL_REST_MIXED_MINUTES = 90
FINAL_REST_DEFAULT_MINUTES = 30
MIN_STEP_SEPARATION_MINUTES = 1

# Schedule fermentation split
ROOM_HOURS_FOR_COLD = 4
BULK_FERMENTATION_COLD_HOURS = 2
MIXED_BULK_RATIO = 0.3
MIXED_COLD_RATIO = 0.7
MAX_FOLDS = 4
FOLD_HYDRATION_THRESHOLD = 70.0

# Tracking
ON_TIME_TOLERANCE_MINUTES = 5
DEFAULT_REMINDER_LEAD_MINUTES = 15
OVERDUE_NOTIFICATION_MINUTES = 10
