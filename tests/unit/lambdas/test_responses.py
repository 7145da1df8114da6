import json

import pytest

from linksnap.lambdas import responses


@pytest.mark.parametrize(
    'factory, status, base',
    [
        (responses.response_400, 400, 'Bad Request'),
        (responses.response_404, 404, 'Not Found'),
        (responses.response_409, 409, 'Conflict'),
        (responses.response_500, 500, 'Internal Server Error'),
    ],
)
def test_error_responses(factory, status, base):
    response = factory(message='details', error_code='SomeCode')

    assert response['statusCode'] == status
    assert response['headers'] == {'Content-Type': 'application/json'}
    assert json.loads(response['body']) == {'message': f'{base} (details)', 'errorCode': 'SomeCode'}


def test_error_response_without_message():
    assert json.loads(responses.response_404()['body']) == {'message': 'Not Found', 'errorCode': 'NotFound'}


def test_response_201():
    response = responses.response_201({'alias': 'ab12cd'}, location='https://short.example/ab12cd')

    assert response['statusCode'] == 201
    assert response['headers']['Location'] == 'https://short.example/ab12cd'
    assert json.loads(response['body']) == {'alias': 'ab12cd'}


def test_response_302():
    response = responses.response_302(location='https://example.com/page')

    assert response['statusCode'] == 302
    assert response['headers']['Location'] == 'https://example.com/page'
    assert response['body'] == ''
