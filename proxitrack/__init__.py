"""
proxitrack - live registry of nearby WiFi and Bluetooth emitters with
smoothed distance estimates.
"""

__version__ = '0.1.0'
