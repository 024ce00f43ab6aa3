"""
Service layer abstraction.

Services encapsulate business logic so that API handlers stay thin and
storage backends can be swapped without touching either.
"""
