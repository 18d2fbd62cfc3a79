# All routes are in this one file
from flask import (
    Blueprint,
    Response,
    current_app,
    redirect,
    render_template,
    request,
    send_file,
    url_for,
)

from .auth import signed_in_only
from .context import current_context
from .errors import CMSError, InvalidCredentials, InvalidName, NotFound, UnsupportedExtension, UsernameTaken
from .render import image_mimetype, render

cms = Blueprint('cms', __name__)


def _documents():
    return current_app.extensions['cms.documents']


def _images():
    return current_app.extensions['cms.images']


def _authenticator():
    return current_app.extensions['cms.authenticator']


def _home_with(message):
    current_context().flash(message)
    return redirect(url_for('cms.index'))


def _form(template, error: CMSError, **kwargs):
    """Re-render a form with the error message and status 422."""
    current_context().flash(error.message)
    return render_template(template, **kwargs), 422


def _show(content, kind):
    body, mimetype = render(content, kind)
    return Response(body, mimetype=mimetype)


@cms.app_context_processor
def _inject_session():
    return {'ctx': current_context()}


@cms.route('/', methods=['GET'])
def index():
    current_app.logger.debug('GET / invoked')
    return render_template(
        'home.html',
        documents=_documents().list_documents(),
        images=_images().list_images(),
    )


# --- Accounts ---

@cms.route('/users/signin', methods=['GET'])
def signin_form():
    return render_template('signin.html')


@cms.route('/signin', methods=['POST'])
def signin():
    current_app.logger.debug('POST /signin invoked')
    username = request.form.get('username', '').strip()
    ctx = current_context()
    try:
        _authenticator().sign_in(ctx, username, request.form.get('password', ''))
    except InvalidCredentials as e:
        return _form('signin.html', e, username=username)
    return _home_with('Welcome!')


@cms.route('/users/signup', methods=['GET'])
def signup_form():
    return render_template('signup.html')


@cms.route('/users/signup', methods=['POST'])
def signup():
    current_app.logger.debug('POST /users/signup invoked')
    username = request.form.get('username', '').strip()
    password = request.form.get('password', '')
    ctx = current_context()
    try:
        _authenticator().sign_up(username, password)
    except UsernameTaken as e:
        ctx.flash(e.message)
        return redirect(url_for('cms.signup_form'))
    except InvalidCredentials as e:
        return _form('signup.html', e, username=username)
    ctx.sign_in(username)
    return _home_with(f'Welcome, {username}!')


@cms.route('/signout', methods=['POST'])
def signout():
    _authenticator().sign_out(current_context())
    return _home_with('you have been signed out')


# --- Documents ---

@cms.route('/new', methods=['GET'])
@signed_in_only
def new_document_form():
    return render_template('new.html')


@cms.route('/new', methods=['POST'])
@signed_in_only
def new_document():
    current_app.logger.debug('POST /new invoked')
    name = request.form.get('file_name', '')
    try:
        name = _documents().create(name)
    except InvalidName as e:
        current_app.logger.debug(f'Rejected document name {name!r}: {e.message}')
        return _form('new.html', e, file_name=name)
    return _home_with(f'made new file: {name}')


@cms.route('/docs/<file>', methods=['GET'])
def view_document(file):
    current_app.logger.debug(f'GET /docs/{file} invoked')
    try:
        content, kind = _documents().read_latest(file)
    except NotFound:
        return _home_with(f'{file} does not exist.')
    return _show(content, kind)


@cms.route('/docs/<file>/edit', methods=['GET'])
@signed_in_only
def edit_document_form(file):
    try:
        content, _ = _documents().read_latest(file)
    except NotFound:
        return _home_with(f'{file} does not exist.')
    return render_template('edit.html', file=file, content=content.decode('utf-8', errors='replace'))


@cms.route('/docs/<file>/edit', methods=['POST'])
@signed_in_only
def edit_document(file):
    current_app.logger.debug(f'POST /docs/{file}/edit invoked')
    try:
        _documents().append_version(file, request.form.get('content', ''))
    except NotFound:
        return _home_with(f'{file} does not exist.')
    return _home_with(f'{file} has been updated.')


@cms.route('/docs/<file>/delete', methods=['POST'])
@signed_in_only
def delete_document(file):
    current_app.logger.debug(f'POST /docs/{file}/delete invoked')
    try:
        _documents().delete(file)
    except NotFound:
        return _home_with(f'{file} does not exist.')
    return _home_with(f'{file} was deleted.')


@cms.route('/docs/<file>/duplicate', methods=['GET', 'POST'])
@signed_in_only
def duplicate_document(file):
    documents = _documents()
    if not documents.exists(file):
        return _home_with(f'{file} does not exist.')
    if request.method == 'GET':
        return render_template('duplicate.html', file=file, new_name=f'copy_of_{file}')

    new_name = request.form.get('new_name', '')
    current_app.logger.debug(f'POST /docs/{file}/duplicate invoked, new_name={new_name!r}')
    try:
        new_name = documents.duplicate(file, new_name)
    except InvalidName as e:
        return _form('duplicate.html', e, file=file, new_name=new_name)
    except NotFound as e:
        return _home_with(e.message)
    return _home_with(f'{file} was duplicated as {new_name}.')


@cms.route('/docs/<file>/versions', methods=['GET'])
def document_versions(file):
    try:
        versions = _documents().versions(file)
    except NotFound:
        return _home_with(f'{file} does not exist.')
    return render_template('versions.html', file=file, versions=versions)


@cms.route('/<file>/version/<version_id>', methods=['GET'])
def view_version(file, version_id):
    current_app.logger.debug(f'GET /{file}/version/{version_id} invoked')
    try:
        content, kind = _documents().read_version(file, version_id)
    except NotFound as e:
        return _home_with(e.message)
    return _show(content, kind)


# --- Images ---

@cms.route('/upload_image', methods=['GET'])
@signed_in_only
def upload_image_form():
    return render_template('upload_image.html')


@cms.route('/upload_image', methods=['POST'])
@signed_in_only
def upload_image():
    current_app.logger.debug('POST /upload_image invoked')
    file = request.files.get('image')
    if not file or file.filename == '':
        current_app.logger.debug('Upload rejected: no file')
        return _form('upload_image.html', UnsupportedExtension('Please choose an image to upload.'))
    try:
        name = _images().upload(file.filename, file.read())
    except UnsupportedExtension as e:
        return _form('upload_image.html', e)
    return _home_with(f'{name} was uploaded.')


@cms.route('/images/<img>', methods=['GET'])
def view_image(img):
    try:
        path = _images().path_for(img)
    except NotFound as e:
        return _home_with(e.message)
    current_app.logger.debug(f'Returning image {path}')
    return send_file(path, mimetype=image_mimetype(img))


@cms.route('/images/<file>/delete', methods=['POST'])
@signed_in_only
def delete_image(file):
    try:
        _images().delete(file)
    except NotFound as e:
        return _home_with(e.message)
    return _home_with(f'{file} was deleted.')
