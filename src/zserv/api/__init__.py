"""Public configuration API for zserv."""
