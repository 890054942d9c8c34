#!/usr/bin/env python3
from mqtt_influx.runner import main

if __name__ == "__main__":
    main()
