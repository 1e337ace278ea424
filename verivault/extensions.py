from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager

# Shared extension instances
bcrypt = Bcrypt()
jwt = JWTManager()
