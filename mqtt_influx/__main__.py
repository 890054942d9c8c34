from mqtt_influx.runner import main

main()
