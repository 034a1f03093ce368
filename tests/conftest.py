# tests/conftest.py
from __future__ import annotations

import textwrap

import pytest


def _src(text: str) -> str:
    return textwrap.dedent(text).lstrip("\n")


TICKET = _src('''
    defmodule Helpdesk.Support.Ticket do
      use Ash.Resource,
        domain: Helpdesk.Support,
        data_layer: AshPostgres.DataLayer

      postgres do
        table "tickets"
        repo Helpdesk.Repo
      end

      actions do
        defaults [:read, :destroy]

        create :open do
          accept [:subject]
          change set_attribute(:status, :open)
        end

        read get_by_subject do
          argument :subject, :string
          filter expr(subject == ^arg(:subject))
        end
      end

      attributes do
        uuid_primary_key :id

        attribute :subject, :string do
          allow_nil? false
        end

        attribute :status, :atom
      end

      relationships do
        belongs_to :representative, Helpdesk.Support.Representative
      end
    end
''')

USER_AUTH = _src('''
    defmodule Helpdesk.Accounts.User do
      use AshAuthentication

      authentication do
        strategies do
          password :default do
            identity_field :email
          end

          magic_link do
            identity_field :email
          end
        end
      end
    end
''')

DOMAIN = _src('''
    defmodule Helpdesk.Support do
      use Ash.Domain

      resources do
        resource Helpdesk.Support.Ticket
        resource Helpdesk.Support.Representative
      end
    end
''')

STATUS_ENUM = _src('''
    defmodule Helpdesk.Support.Ticket.Status do
      use Ash.Type.Enum,
        values: [:open, :closed, :pending]
    end
''')

PHOENIX_CONTROLLER = _src('''
    defmodule HelpdeskWeb.PageController do
      use HelpdeskWeb, :controller

      def home(conn, _params) do
        render(conn, :home)
      end
    end
''')

# small resource that the Ash grammar parses without ambiguity
GRAMMAR_RESOURCE = _src('''
    defmodule Helpdesk.Support.Representative do
      use Ash.Resource, domain: Helpdesk.Support

      @moduledoc """
      A support representative.
      """

      attributes do
        uuid_primary_key :id
        attribute :name, :string, allow_nil?: false
      end

      actions do
        defaults [:read, :destroy]

        create :register do
          accept [:name]
        end
      end
    end
''')

UNCLOSED = _src('''
    defmodule Broken do
      use Ash.Resource

      attributes do
        attribute :email, :string
        attribute :name, :string
''')


@pytest.fixture
def ticket_source() -> str:
    return TICKET


@pytest.fixture
def user_auth_source() -> str:
    return USER_AUTH


@pytest.fixture
def domain_source() -> str:
    return DOMAIN


@pytest.fixture
def enum_source() -> str:
    return STATUS_ENUM


@pytest.fixture
def phoenix_source() -> str:
    return PHOENIX_CONTROLLER


@pytest.fixture
def grammar_resource_source() -> str:
    return GRAMMAR_RESOURCE


@pytest.fixture
def unclosed_source() -> str:
    return UNCLOSED
