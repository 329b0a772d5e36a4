from shopeasy.app.factory import create_app

app = create_app()

if __name__ == "__main__":
    app.logger.info("Frontend server running on port %s", app.config["PORT"])
    app.run(host=app.config["HOST"], port=app.config["PORT"])
