# Workshop CRM - customers, vehicles and service orders
__version__ = "1.0.0"
