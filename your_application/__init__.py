"""Ponto de entrada WSGI.

Servicos Python no Render usam por padrao um comando gunicorn apontando
para este pacote. A aplicacao e criada com a configuracao lida do ambiente
e exposta como `application`, por exemplo:
`gunicorn your_application:application`.
"""

from app import create_app

application = create_app()

# Alias opcional para quem procurar `app`.
app = application
