"""
Batch job entry points run by the scheduler: burn_job (burn.json), then price_job (price.json).
"""
