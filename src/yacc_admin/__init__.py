"""Administrative settings form for the YACC repository hook."""
