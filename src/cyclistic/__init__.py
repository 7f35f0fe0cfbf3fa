# Cyclistic trip reconciliation pipeline
#
# Modules, in the order the pipeline runs them:
#
# - load.py: Read the legacy (2019) and current (2020) trip files
# - normalize.py: Map the legacy schema onto the canonical one
# - derive.py: Parse timestamps, compute durations and calendar fields
# - filters.py: Drop short/invalid trips and geolocation columns
# - unify.py: Stack both periods into one table
# - aggregate.py: Summary tables by rider type
#
# Usage:
#   cyclistic-pipeline --legacy data/Divvy_Trips_2019_Q1.xlsx \
#                      --current data/Divvy_Trips_2020_Q1.xlsx
