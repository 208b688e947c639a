import os
from dynamic_forms import app_config, config, create_app, db

# Settings come from the json config file when there is one, otherwise from the environment (see config.DefaultConfig)
config_class = config.DefaultConfig
if os.path.exists(config.JSON_CONFIG_FILE):
    config_class = app_config.json_to_config_factory(config_json_path=config.JSON_CONFIG_FILE)

app = create_app(config_class)
app.app_context().push()
db.create_all()

if __name__ == '__main__':
    app.run(debug=True)
