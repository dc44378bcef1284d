"""SiteAudit - find users and printers whose location has no AD subnet."""

__version__ = "1.0.0"
