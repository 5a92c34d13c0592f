from . import OpenKounterApplication


def main():
	app = OpenKounterApplication()
	app.run()


if __name__ == "__main__":
	main()
