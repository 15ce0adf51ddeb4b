"""Reading pages from a MediaWiki installation."""
