from .probe import BrowserLocationProbe, IpLocationProbe, LocationError, LocationProbe

__all__ = ["LocationProbe", "LocationError", "BrowserLocationProbe", "IpLocationProbe"]
