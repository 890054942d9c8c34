"""MQTT to InfluxDB bridge - Main Package"""

__version__ = '0.1.0'
__description__ = 'Write values extracted from MQTT JSON messages to InfluxDB 1.x or 2.x'
