"""Build R packages shipped inside jars."""
