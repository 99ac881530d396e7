# Urban delivery (short haul)
SHORT_HAUL_MAX_KM = 15  # Trips up to this distance use the urban model
URBAN_SPEED_KMH = 25  # Average city speed incl. traffic lights
URBAN_LOAD_UNLOAD_MINUTES = 15
URBAN_TRAFFIC_BUFFER = 0.2  # 20% of base time

# Truck speeds per road class (km/h)
TRUCK_SPEEDS_KMH = {
    'motorway': 80,
    'trunk': 60,
    'primary': 50,
    'secondary': 40,  # not selected by distance tiers
    'residential': 30,  # not selected by distance tiers
}
MOTORWAY_MIN_KM = 100  # Above this the trip is assumed to run on motorways
TRUNK_MIN_KM = 50

# Multipliers applied to base driving time
TIME_FACTORS = {
    'peak': 1.4,
    'normal': 1.2,
    'nighttime': 1.1,
}

# Driver rest rules
MAX_CONTINUOUS_DRIVING_HOURS = 4.5  # Requires a break after
REST_BREAK_MINUTES = 45

# Fixed truck delays (minutes)
LOADING_UNLOADING_LONG = 30
LOADING_UNLOADING_SHORT = 20
LOADING_LONG_MIN_KM = 50
CITY_ACCESS_MINUTES = 20
CITY_ACCESS_MAX_KM = 50
WEIGHT_STATION_MINUTES = 15
WEIGHT_STATION_MIN_KM = 100

# Map defaults
DEFAULT_MAP_CENTER = (20.5937, 78.9629)
DEFAULT_MAP_ZOOM = 5
MAP_FIT_PADDING = (50, 50)
