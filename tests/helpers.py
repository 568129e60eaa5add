from readings import Reading


def make_reading(time="2024-01-01", location="Reef A", **overrides):
    values = {
        "water_temperature": 26.0,
        "salinity": 35.0,
        "ph_level": 8.1,
        "dissolved_oxygen": 6.5,
        "turbidity": 0.5,
        "nitrate": 0.05,
    }
    values.update(overrides)
    return Reading(time=time, location=location, **values)
