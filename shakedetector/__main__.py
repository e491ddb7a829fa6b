from shakedetector.main import run

run()
