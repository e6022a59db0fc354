"""Web API for running simulations over HTTP."""
